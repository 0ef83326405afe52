from typing import Any, List, Union
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from src.core.data_models import finite_float
from src.core.errors import MalformedResponseError


class ChartDataPoint(BaseModel):
    """Represents a single slice of a pie chart."""
    label: str = Field(description="The label for the slice (e.g., a country or sector name).")
    value: float = Field(description="The numerical size of the slice.")


class ChartAnswer(BaseModel):
    """
    What the language model is asked to produce for a prompt.
    If the answer does not contain chartable data, the 'chartable' field should be False
    and 'data' should be empty.
    """
    chartable: bool = Field(description="Set to True if the answer is best shown as a pie chart, otherwise False.")
    title: str = Field(default="", description="A descriptive title for the chart (e.g., 'Energy Mix by Source').")
    data: List[ChartDataPoint] = Field(default_factory=list, description="The slices to be plotted.")
    answer: str = Field(default="", description="A plain-text answer to the prompt.")

    def to_payload(self) -> dict:
        """Converts the answer into the backend wire format."""
        if self.chartable and self.data:
            return {
                "type": "pie",
                "title": self.title or "Chart",
                "labels": [point.label for point in self.data],
                "values": [point.value for point in self.data],
            }
        return {"response": self.answer}


# --- Replies rendered by the chat screen ---

class PieChartReply(BaseModel):
    title: str = "Chart"
    labels: List[str]
    values: List[float]

    @field_validator("title", mode="before")
    @classmethod
    def _title_text(cls, title):
        if isinstance(title, bool) or not isinstance(title, (str, int, float)) or title == "":
            return "Chart"
        return str(title)

    @field_validator("values", mode="before")
    @classmethod
    def _numeric_values(cls, values):
        if not isinstance(values, list) or any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in values):
            raise ValueError("values must be a list of numbers")
        if any(finite_float(v) is None for v in values):
            raise ValueError("pie slices must be finite")
        if any(v < 0 for v in values):
            raise ValueError("pie slices cannot be negative")
        return values

    @field_validator("labels", mode="before")
    @classmethod
    def _label_text(cls, labels):
        if not isinstance(labels, list):
            raise ValueError("labels must be a list")
        return [str(label) for label in labels]

    @model_validator(mode="after")
    def _same_length(self):
        if not self.labels or len(self.labels) != len(self.values):
            raise ValueError("labels and values must be non-empty and the same length")
        return self


class TextReply(BaseModel):
    text: str


ChatReply = Union[PieChartReply, TextReply]


def parse_chat_reply(payload: Any) -> ChatReply:
    """
    Interprets a backend reply: {"type": "pie", "labels", "values", "title"} becomes a
    PieChartReply, {"response": "..."} becomes a TextReply.

    Raises:
        MalformedResponseError: if the payload is neither.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError("chat reply is not an object")

    if payload.get("type") == "pie":
        try:
            return PieChartReply(
                title=payload.get("title"),
                labels=payload.get("labels"),
                values=payload.get("values"),
            )
        except ValidationError as e:
            if not isinstance(payload.get("response"), str):
                raise MalformedResponseError(f"invalid pie data: {e}") from e

    text = payload.get("response")
    if isinstance(text, str):
        return TextReply(text=text)
    raise MalformedResponseError("chat reply has neither pie data nor a response")
