import plotly.graph_objects as go
import pytest

from chart_builder import (
    NO_VALID_DATA_MESSAGE,
    TOO_FEW_POINTS_MESSAGE,
    ChartView,
    ErrorView,
    LoadingView,
    build_view,
    chartable_records,
    create_pie_chart,
    format_value,
    records_to_frame,
)
from chart_models import PieChartReply
from src.config import INDICATORS
from src.core.parser import parse_record
from src.core.state import Error, Idle, Loading, Success
from tests.helpers import make_raw_record


def records(*pairs):
    return [parse_record(make_raw_record(date, value)) for date, value in pairs]


def test_chartable_records_filters_and_sorts():
    data = records(("2021", 6.2), ("2019", 2.6), ("2020", None), ("", 1.0), ("n/a", 4.0), ("2018", 3.3))
    assert [r.year for r in chartable_records(data)] == [2018, 2019, 2021]


def test_value_bounds_are_inclusive():
    data = records(("2000", -1.0), ("2001", 0.0), ("2002", 100.0), ("2003", 100.5))
    assert [r.year for r in chartable_records(data, value_bounds=(0.0, 100.0))] == [2001, 2002]


def test_window_keeps_most_recent():
    data = records(*[(str(y), float(y)) for y in range(2000, 2015)])
    kept = chartable_records(data, window=3)
    assert [r.year for r in kept] == [2012, 2013, 2014]
    assert chartable_records(data, window=0) == []


def test_zero_is_a_valid_value():
    data = records(("2000", 0.0), ("2001", 1.0))
    assert len(chartable_records(data)) == 2


def test_non_finite_values_are_not_charted(gdp_spec):
    data = records(("2018", float("nan")), ("2019", float("inf")), ("2020", 1.0), ("2021", 2.0))
    assert [r.year for r in chartable_records(data)] == [2020, 2021]
    assert build_view(Success(records(("2019", float("nan")), ("2020", 1.0))), gdp_spec) == ErrorView(TOO_FEW_POINTS_MESSAGE)


def test_table_is_non_decreasing_by_year(gdp_spec):
    data = records(("2010", 1.0), ("2005", 2.0), ("2010", 3.0), ("1999", 4.0), ("2007", 5.0))
    view = build_view(Success(data), gdp_spec)

    assert isinstance(view, ChartView)
    years = list(view.frame["year"])
    assert years == sorted(years)
    assert list(view.table["Year"]) == ["1999", "2005", "2007", "2010", "2010"]


def test_frame_columns():
    frame = records_to_frame(records(("2019", 2.6), ("2020", -3.1)))
    assert list(frame.columns) == ["year", "value", "country", "indicator"]
    assert frame["country"].tolist() == ["World", "World"]


@pytest.mark.parametrize("data, message", [
    ([], NO_VALID_DATA_MESSAGE),
    ([("2020", None), ("x", 1.0)], NO_VALID_DATA_MESSAGE),
    ([("2020", 1.0)], TOO_FEW_POINTS_MESSAGE),
    ([("2020", 1.0), ("2021", None)], TOO_FEW_POINTS_MESSAGE),
])
def test_fewer_than_two_points_replaces_chart(gdp_spec, data, message):
    assert build_view(Success(records(*data)), gdp_spec) == ErrorView(message)


def test_bounds_apply_before_point_count(agri_spec):
    view = build_view(Success(records(("2000", 40.0), ("2001", 140.0))), agri_spec)
    assert view == ErrorView(TOO_FEW_POINTS_MESSAGE)


def test_view_for_error_and_loading(gdp_spec):
    assert build_view(Error("Request timed out"), gdp_spec) == ErrorView("Request timed out")
    assert build_view(Loading(), gdp_spec) == LoadingView()
    assert build_view(Idle(), gdp_spec) == LoadingView()


def test_chart_view_has_line_figure(gdp_spec):
    view = build_view(Success(records(("2019", 2.6), ("2020", -3.1), ("2021", 6.2))), gdp_spec)
    assert isinstance(view.figure, go.Figure)
    assert list(view.figure.data[0].x) == [2019, 2020, 2021]
    assert list(view.figure.data[0].y) == [2.6, -3.1, 6.2]


def test_format_value():
    assert format_value(3.5, INDICATORS["gdp"]) == "3.50%"
    assert format_value(35123.4, INDICATORS["co2"]) == "35,123 Mt"
    assert format_value(37.04, INDICATORS["agri_land"]) == "37.0%"


def test_create_pie_chart():
    fig = create_pie_chart(PieChartReply(title="Energy mix", labels=["Coal", "Gas"], values=[60, 40]))
    assert list(fig.data[0].labels) == ["Coal", "Gas"]
    assert fig.layout.title.text == "Energy mix"
