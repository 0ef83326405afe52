# main.py

import argparse
import logging
import sys

from chart_builder import chartable_records, format_value
from src.config import DEFAULT_COUNTRY, INDICATORS, configure_logging, get_indicator
from src.core.countries import country_label, resolve_country_code
from src.core.errors import InsufficientDataError, describe_failure
from src.core.state import Error
from src.core.world_bank import WorldBankClient

logger = logging.getLogger(__name__)


def positive_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Print a World Bank indicator series as a year/value table.")
    parser.add_argument("indicator", choices=sorted(INDICATORS), help="Indicator to fetch.")
    parser.add_argument("--country", default=DEFAULT_COUNTRY, help="Country name, ISO code or aggregate (default: %(default)s).")
    parser.add_argument("--last", type=positive_int, default=None, metavar="N", help="Only print the most recent N years.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests and dropped records.")
    return parser.parse_args(argv)


def run(argv=None, client=None) -> int:
    """Fetches the requested indicator and prints it. Returns the process exit code."""
    args = parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")

    spec = get_indicator(args.indicator)
    try:
        country = resolve_country_code(args.country)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    client = client or WorldBankClient()
    try:
        state = client.load_indicator(spec, country)
    except Exception as e:
        logger.debug("Fetch failed", exc_info=True)
        print(f"Error: {describe_failure(e)}", file=sys.stderr)
        return 1

    if isinstance(state, Error):
        print(f"Error: {state.message}", file=sys.stderr)
        return 1

    records = chartable_records(state.data, value_bounds=spec.value_bounds, window=args.last)
    if not records:
        print(f"Error: {InsufficientDataError.user_message}", file=sys.stderr)
        return 1

    print(f"{spec.title}: {country_label(country)}")
    for record in records:
        print(f"Year {record.year}: {format_value(record.value, spec)}")
    return 0


if __name__ == "__main__":
    sys.exit(run())
