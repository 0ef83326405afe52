def make_raw_record(date="2020", value=3.5, **overrides):
    """A well-formed element of the World Bank record array."""
    record = {
        "indicator": {"id": "NY.GDP.MKTP.KD.ZG", "value": "GDP growth (annual %)"},
        "country": {"id": "1W", "value": "World"},
        "countryiso3code": "WLD",
        "date": date,
        "value": value,
        "unit": "",
        "obs_status": "",
        "decimal": 1,
    }
    record.update(overrides)
    return record
