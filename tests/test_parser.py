import json

import pytest
from src.core.data_models import IndicatorRecord
from src.core.errors import MalformedResponseError
from src.core.parser import (
    NO_DATA_MESSAGE,
    parse_indicator_payload,
    parse_metadata,
    parse_record,
    parse_records,
)
from src.core.state import Error, Success
from tests.helpers import make_raw_record


def test_documented_example_yields_one_record():
    payload = [{}, [{"indicator": {"id": "x", "value": "GDP"}, "country": {"id": "WLD", "value": "World"},
                     "countryiso3code": "WLD", "date": "2020", "value": 3.5, "unit": "",
                     "obs_status": "", "decimal": 1}]]
    state = parse_indicator_payload(payload)

    assert isinstance(state, Success)
    assert len(state.data) == 1
    record = state.data[0]
    assert record.value == 3.5
    assert record.year == 2020
    assert record.indicator.label == "GDP"
    assert record.country.id == "WLD"
    assert record.iso3_code == "WLD"
    assert record.decimal == 1


@pytest.mark.parametrize("payload", [
    [{}],
    [{}, {"not": "a list"}],
    [{}, "records"],
    [{}, None],
    {"page": 1},
    None,
    "[]",
    [],
])
def test_wrong_top_level_shape_is_invalid_response(payload):
    assert parse_indicator_payload(payload) == Error("Invalid API response")


def test_api_error_envelope_is_invalid_response():
    payload = [{"message": [{"id": "120", "key": "Invalid value", "value": "The provided parameter value is not valid"}]}]
    assert parse_indicator_payload(payload) == Error("Invalid API response")
    with pytest.raises(MalformedResponseError, match="not valid"):
        parse_records(payload)


@pytest.mark.parametrize("value", [None, "3.5", "", True, [1], {"v": 1}])
def test_missing_or_non_numeric_value_is_none_not_zero(value):
    record = parse_record(make_raw_record(value=value))
    assert record is not None
    assert record.value is None


def test_missing_value_key_is_none():
    raw = make_raw_record()
    del raw["value"]
    assert parse_record(raw).value is None


def test_integer_value_becomes_float():
    assert parse_record(make_raw_record(value=7)).value == 7.0


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), 10 ** 400, -(10 ** 400)])
def test_non_finite_or_overflowing_value_is_none(value):
    record = parse_record(make_raw_record(value=value))
    assert record is not None
    assert record.value is None


@pytest.mark.parametrize("decimal", [float("nan"), float("inf"), 10 ** 400])
def test_non_finite_or_overflowing_decimal_is_zero(decimal):
    record = parse_record(make_raw_record(decimal=decimal))
    assert record is not None
    assert record.decimal == 0


def test_payload_with_nan_and_huge_numbers_keeps_the_other_records():
    body = ('[{}, [{"indicator": {"id": "x"}, "country": {"id": "WLD"}, "date": "2019", "value": NaN},'
            ' {"indicator": {"id": "x"}, "country": {"id": "WLD"}, "date": "2020", "value": 1e400, "decimal": Infinity},'
            ' {"indicator": {"id": "x"}, "country": {"id": "WLD"}, "date": "2021", "value": 2.5}]]')
    state = parse_indicator_payload(json.loads(body))

    assert isinstance(state, Success)
    assert [(r.year, r.value) for r in state.data] == [(2019, None), (2020, None), (2021, 2.5)]
    assert state.data[1].decimal == 0



def test_malformed_elements_are_dropped():
    valid = [make_raw_record(str(year), float(year - 2000)) for year in range(2010, 2015)]
    missing_indicator = make_raw_record()
    del missing_indicator["indicator"]
    malformed = [
        None,
        42,
        "record",
        [make_raw_record()],
        missing_indicator,
        make_raw_record(country="World"),
        make_raw_record(country={"value": "World"}),
        make_raw_record(indicator={"id": None}),
    ]
    payload = [{}, valid[:2] + malformed + valid[2:]]

    records = parse_records(payload)

    assert len(records) == len(valid)
    assert [r.year for r in records] == [2010, 2011, 2012, 2013, 2014]


def test_optional_fields_default_when_missing():
    record = parse_record({"indicator": {"id": "AG.LND.AGRI.ZS"}, "country": {"id": "1W"}})
    assert record == IndicatorRecord.model_validate({"indicator": {"id": "AG.LND.AGRI.ZS"}, "country": {"id": "1W"}})
    assert record.period == ""
    assert record.year is None
    assert record.unit == ""
    assert record.decimal == 0
    assert record.indicator.label == ""


def test_non_numeric_year_is_kept_at_parse_time():
    record = parse_record(make_raw_record(date="2020Q1"))
    assert record is not None
    assert record.year is None


def test_numeric_date_is_read_as_text():
    record = parse_record(make_raw_record(date=2019))
    assert record.period == "2019"
    assert record.year == 2019


def test_all_elements_malformed_reports_no_data():
    assert parse_indicator_payload([{}, [None, 1, "x"]]) == Error(NO_DATA_MESSAGE)


def test_empty_record_array_reports_no_data():
    assert parse_indicator_payload([{}, []]) == Error(NO_DATA_MESSAGE)


def test_records_are_immutable():
    record = parse_record(make_raw_record())
    with pytest.raises(Exception):
        record.value = 1.0


def test_parse_metadata(metadata):
    meta = parse_metadata(metadata)
    assert meta.per_page == 100
    assert meta.source_id == "2"
    assert meta.last_updated == "2025-01-28"
    assert parse_metadata("nope") is None
