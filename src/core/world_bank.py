# src/core/world_bank.py

import logging
from typing import Any, Optional

import requests

from src.config import DEFAULT_COUNTRY, REQUEST_TIMEOUT, WORLD_BANK_BASE_URL, IndicatorSpec
from src.core.errors import MalformedResponseError, translate_request_error
from src.core.parser import parse_indicator_payload
from src.core.state import FetchState

logger = logging.getLogger(__name__)


class WorldBankClient:
    """Thin client for the World Bank v2 indicators API."""

    def __init__(self, session: Optional[requests.Session] = None,
                 base_url: str = WORLD_BANK_BASE_URL, timeout: float = REQUEST_TIMEOUT):
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def build_url(self, indicator_code: str, country: str = DEFAULT_COUNTRY) -> str:
        return f"{self.base_url}/country/{country}/indicator/{indicator_code}"

    def build_params(self, spec: IndicatorSpec) -> dict:
        params = {"format": "json", "per_page": spec.per_page}
        if spec.date_range:
            params["date"] = spec.date_range
        return params

    def fetch_payload(self, spec: IndicatorSpec, country: str = DEFAULT_COUNTRY) -> Any:
        """
        Downloads the raw `[metadata, records]` JSON for an indicator.

        Raises:
            FetchError: or one of its subclasses, for network, HTTP and decoding failures.
        """
        url = self.build_url(spec.code, country)
        params = self.build_params(spec)
        logger.info("GET %s %s", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise translate_request_error(e) from e
        except ValueError as e:
            raise MalformedResponseError(str(e)) from e

        size = len(payload) if isinstance(payload, list) else "n/a"
        logger.info("Response for %s received (top-level size: %s)", spec.code, size)
        return payload

    def load_indicator(self, spec: IndicatorSpec, country: str = DEFAULT_COUNTRY) -> FetchState:
        """Fetches and parses an indicator series into Success(records) or Error(message)."""
        return parse_indicator_payload(self.fetch_payload(spec, country))

