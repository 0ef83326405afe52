import pytest
from unittest.mock import MagicMock
from src.config import INDICATORS
from tests.helpers import make_raw_record


@pytest.fixture
def metadata():
    return {"page": 1, "pages": 1, "per_page": "100", "total": 3,
            "sourceid": "2", "lastupdated": "2025-01-28"}


@pytest.fixture
def gdp_payload(metadata):
    """A response with three usable years, out of order, and one year without a value."""
    return [metadata, [
        make_raw_record("2021", 6.2),
        make_raw_record("2019", 2.6),
        make_raw_record("2020", -3.1),
        make_raw_record("2022", None),
    ]]


@pytest.fixture
def gdp_spec():
    return INDICATORS["gdp"]


@pytest.fixture
def agri_spec():
    return INDICATORS["agri_land"]


@pytest.fixture
def mock_response():
    """Builds a fake requests.Response returning the given JSON."""
    def _make(payload=None, json_error=None):
        response = MagicMock()
        response.raise_for_status.return_value = None
        if json_error is not None:
            response.json.side_effect = json_error
        else:
            response.json.return_value = payload
        return response
    return _make


@pytest.fixture
def mock_session():
    return MagicMock()
