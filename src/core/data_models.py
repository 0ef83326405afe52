# src/core/data_models.py

import math
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def finite_float(value: Any) -> Optional[float]:
    """Returns the value as a finite float, or None for non-numbers, NaN, infinities and overflow."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _as_text(value: Any) -> str:
    """World Bank fields arrive as strings, numbers or null; keep them as text."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (str, int, float)):
        return str(value)
    return ""


# --- Pydantic Models for the World Bank Indicators API ---

class IndicatorRef(BaseModel):
    """The nested `indicator` object, e.g. {"id": "NY.GDP.MKTP.KD.ZG", "value": "GDP growth"}."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="The World Bank indicator code.")
    label: str = Field(default="", alias="value", description="Human readable indicator name.")

    @field_validator("id", mode="before")
    @classmethod
    def _require_id(cls, value):
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValueError("id must be a string")
        return str(value)

    @field_validator("label", mode="before")
    @classmethod
    def _label_text(cls, value):
        return _as_text(value)


class CountryRef(IndicatorRef):
    """The nested `country` object, e.g. {"id": "1W", "value": "World"}."""


class IndicatorRecord(BaseModel):
    """One observation of an indicator for a country and year."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    indicator: IndicatorRef
    country: CountryRef
    iso3_code: str = Field(default="", alias="countryiso3code")
    period: str = Field(default="", alias="date", description="The year as sent by the API.")
    value: Optional[float] = Field(default=None, description="None when there is no observation.")
    unit: str = ""
    obs_status: str = ""
    decimal: int = 0

    @field_validator("iso3_code", "period", "unit", "obs_status", mode="before")
    @classmethod
    def _text_fields(cls, value):
        return _as_text(value)

    @field_validator("value", mode="before")
    @classmethod
    def _numeric_or_none(cls, value):
        # Non-numeric means "no observation", not zero.
        return finite_float(value)

    @field_validator("decimal", mode="before")
    @classmethod
    def _decimal_places(cls, value):
        number = finite_float(value)
        return 0 if number is None else int(number)

    @property
    def year(self) -> Optional[int]:
        """The period as an integer year, or None if it is not one."""
        try:
            return int(self.period)
        except ValueError:
            return None


class PageMetadata(BaseModel):
    """Paging information sent as the first element of every response."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: Optional[int] = None
    pages: Optional[int] = None
    per_page: Optional[int] = None
    total: Optional[int] = None
    source_id: Optional[str] = Field(default=None, alias="sourceid")
    last_updated: Optional[str] = Field(default=None, alias="lastupdated")


class PredictionResult(BaseModel):
    """The label and confidence returned by the audio classification server."""
    model_config = ConfigDict(frozen=True)

    label: str = Field(description="The predicted class.")
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence between 0 and 1.")
