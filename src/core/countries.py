# src/core/countries.py

import pycountry

# World Bank aggregate codes that are not ISO countries
AGGREGATES = {
    "WLD": "World",
    "EAS": "East Asia & Pacific",
    "ECS": "Europe & Central Asia",
    "LCN": "Latin America & Caribbean",
    "MEA": "Middle East & North Africa",
    "NAC": "North America",
    "SAS": "South Asia",
    "SSF": "Sub-Saharan Africa",
    "HIC": "High income",
    "LMC": "Lower middle income",
    "LIC": "Low income",
    "UMC": "Upper middle income",
    "EUU": "European Union",
}

# World Bank spellings that pycountry's fuzzy search gets wrong
_SPECIAL_NAMES = {
    "iran, islamic rep.": "IRN",
    "egypt, arab rep.": "EGY",
    "korea, rep.": "KOR",
    "cote d'ivoire": "CIV",
    "syrian arab republic": "SYR",
    "yemen, rep.": "YEM",
    "venezuela, rb": "VEN",
}


def resolve_country_code(name_or_code: str) -> str:
    """
    Returns the code the World Bank API expects for a country or aggregate.

    Accepts an aggregate code (e.g. "WLD"), an ISO alpha-3 or alpha-2 code,
    or a country name.

    Raises:
        ValueError: if nothing matches.
    """
    text = (name_or_code or "").strip()
    if not text:
        raise ValueError("A country name or code is required")

    upper = text.upper()
    if upper in AGGREGATES:
        return upper
    lowered = text.lower()
    if lowered in _SPECIAL_NAMES:
        return _SPECIAL_NAMES[lowered]
    for code, label in AGGREGATES.items():
        if label.lower() == lowered:
            return code

    if len(upper) == 3:
        country = pycountry.countries.get(alpha_3=upper)
        if country:
            return country.alpha_3
    if len(upper) == 2:
        country = pycountry.countries.get(alpha_2=upper)
        if country:
            return country.alpha_3

    try:
        return pycountry.countries.search_fuzzy(text)[0].alpha_3
    except LookupError:
        raise ValueError(f"Unknown country: {name_or_code}") from None


def country_label(code: str) -> str:
    """Display name for a code returned by resolve_country_code."""
    if code in AGGREGATES:
        return AGGREGATES[code]
    country = pycountry.countries.get(alpha_3=code)
    return country.name if country else code
