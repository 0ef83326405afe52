import logging
import os
from typing import NamedTuple, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


class IndicatorSpec(NamedTuple):
    key: str
    code: str
    title: str
    unit_suffix: str
    value_format: str
    per_page: int
    date_range: Optional[str] = None
    value_bounds: Optional[Tuple[float, float]] = None


# World Bank indicators shown in the dashboard
INDICATORS = {
    "gdp": IndicatorSpec(
        key="gdp",
        code="NY.GDP.MKTP.KD.ZG",
        title="📈 World GDP Growth (Annual %)",
        unit_suffix="%",
        value_format="{:.2f}",
        per_page=100,
    ),
    "co2": IndicatorSpec(
        key="co2",
        code="EN.GHG.CO2.AG.MT.CE.AR5",
        title="🌍 World CO2 Emissions (Mt CO2e)",
        unit_suffix=" Mt",
        value_format="{:,.0f}",
        per_page=30,
    ),
    "agri_land": IndicatorSpec(
        key="agri_land",
        code="AG.LND.AGRI.ZS",
        title="🌾 Agricultural Land (% of land area)",
        unit_suffix="%",
        value_format="{:.1f}",
        per_page=30,
        date_range="2000:2023",
        value_bounds=(0.0, 100.0),
    ),
}


def get_indicator(key: str) -> IndicatorSpec:
    """Looks up an indicator by its registry key."""
    try:
        return INDICATORS[key]
    except KeyError:
        known = ", ".join(sorted(INDICATORS))
        raise KeyError(f"Unknown indicator '{key}'. Known indicators: {known}") from None


# Endpoints
WORLD_BANK_BASE_URL = os.getenv("WORLD_BANK_BASE_URL", "https://api.worldbank.org/v2")
PREDICTION_URL = os.getenv("PREDICTION_URL", "http://localhost:5001/predict")
LLM_BACKEND_URL = os.getenv("LLM_BACKEND_URL") or None

REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))
DEFAULT_COUNTRY = os.getenv("DEFAULT_COUNTRY", "WLD")

# Model configuration
LLM_MODEL_NAME = os.getenv("LLM_MODEL_NAME", "gemini-1.5-pro-latest")
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: Optional[str] = None):
    """Sets up root logging for the app and the CLI."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
