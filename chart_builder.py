from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import pandas as pd
import plotly.graph_objects as go

from chart_models import PieChartReply
from src.config import IndicatorSpec
from src.core.data_models import IndicatorRecord
from src.core.errors import InsufficientDataError
from src.core.state import Error, FetchState, Success

NO_VALID_DATA_MESSAGE = InsufficientDataError.user_message
TOO_FEW_POINTS_MESSAGE = "Need at least 2 data points"
MIN_CHART_POINTS = 2


def chartable_records(records: Sequence[IndicatorRecord],
                      value_bounds: Optional[Tuple[float, float]] = None,
                      window: Optional[int] = None) -> List[IndicatorRecord]:
    """
    Keeps records that have a value and an integer year, sorted by year ascending.

    Args:
        records: Parsed records in any order.
        value_bounds: Inclusive (low, high); records outside are dropped.
        window: If given, only the most recent `window` records are kept.
    """
    valid = [r for r in records if r.value is not None and r.year is not None]
    if value_bounds is not None:
        low, high = value_bounds
        valid = [r for r in valid if low <= r.value <= high]
    valid.sort(key=lambda r: r.year)
    if window is not None:
        valid = valid[-window:] if window > 0 else []
    return valid


def records_to_frame(records: Sequence[IndicatorRecord]) -> pd.DataFrame:
    """Builds a year/value DataFrame; expects records already filtered and sorted."""
    return pd.DataFrame(
        {
            "year": [r.year for r in records],
            "value": [r.value for r in records],
            "country": [r.country.label for r in records],
            "indicator": [r.indicator.label for r in records],
        },
        columns=["year", "value", "country", "indicator"],
    )


def format_value(value: float, spec: IndicatorSpec) -> str:
    return spec.value_format.format(value) + spec.unit_suffix


def table_frame(frame: pd.DataFrame, spec: IndicatorSpec) -> pd.DataFrame:
    """The detailed-data table: one row per year with the formatted value."""
    return pd.DataFrame({
        "Year": frame["year"].astype(str),
        "Value": [format_value(v, spec) for v in frame["value"]],
    })


def create_line_chart(frame: pd.DataFrame, spec: IndicatorSpec):
    """Creates a Plotly line chart of value by year."""
    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=frame["year"],
        y=frame["value"],
        mode="lines+markers",
        name=spec.key,
    ))

    fig.update_layout(
        xaxis=dict(title="Year", tickformat="d"),
        yaxis=dict(title=spec.unit_suffix.strip() or "Value", ticksuffix=spec.unit_suffix.strip()),
        showlegend=False,
        margin={"r": 0, "t": 30, "l": 0, "b": 0},
    )
    return fig


def create_pie_chart(reply: PieChartReply):
    """Creates a Plotly donut chart from a chat pie reply."""
    fig = go.Figure(go.Pie(
        labels=reply.labels,
        values=reply.values,
        hole=0.58,
        textinfo="percent+label",
    ))
    fig.update_layout(title=dict(text=reply.title, x=0.5), showlegend=False)
    return fig


# --- Views: what a screen shows for a given fetch state ---

@dataclass(frozen=True)
class LoadingView:
    pass


@dataclass(frozen=True)
class ErrorView:
    message: str
    retryable: bool = True


@dataclass(frozen=True, eq=False)
class ChartView:
    frame: pd.DataFrame
    table: pd.DataFrame
    figure: go.Figure


IndicatorView = Union[LoadingView, ErrorView, ChartView]


def build_view(state: FetchState, spec: IndicatorSpec) -> IndicatorView:
    """Maps a fetch state to a spinner, an error panel, or a chart with its table."""
    if isinstance(state, Error):
        return ErrorView(state.message)
    if not isinstance(state, Success):
        return LoadingView()

    records = chartable_records(state.data, value_bounds=spec.value_bounds)
    if not records:
        return ErrorView(NO_VALID_DATA_MESSAGE)
    if len(records) < MIN_CHART_POINTS:
        return ErrorView(TOO_FEW_POINTS_MESSAGE)

    frame = records_to_frame(records)
    return ChartView(frame=frame, table=table_frame(frame, spec), figure=create_line_chart(frame, spec))
