# src/core/parser.py

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from src.core.data_models import IndicatorRecord, PageMetadata
from src.core.errors import MalformedResponseError
from src.core.state import Error, FetchState, Success

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data available"


def parse_record(item: Any) -> Optional[IndicatorRecord]:
    """Validates one element of the record array; returns None if it is malformed."""
    if not isinstance(item, dict):
        logger.debug("Skipping non-object record: %r", item)
        return None
    try:
        return IndicatorRecord.model_validate(item)
    except ValidationError as e:
        logger.debug("Skipping malformed record (%d errors): %s", e.error_count(), item)
        return None


def parse_metadata(item: Any) -> Optional[PageMetadata]:
    if not isinstance(item, dict):
        return None
    try:
        return PageMetadata.model_validate(item)
    except ValidationError:
        return None


def _api_error_message(payload: Any) -> Optional[str]:
    """
    The API reports bad requests as [{"message": [{"id": ..., "key": ..., "value": ...}]}].
    Returns the message text when the payload has that shape.
    """
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
        return None
    messages = payload[0].get("message")
    if not isinstance(messages, list):
        return None
    texts = [str(m.get("value") or m.get("key") or "") for m in messages if isinstance(m, dict)]
    return "; ".join(t for t in texts if t) or "unknown API error"


def parse_records(payload: Any) -> List[IndicatorRecord]:
    """
    Extracts records from a `[metadata, records]` response.

    Raises:
        MalformedResponseError: if the payload is not a list whose second element is a list.
    """
    api_message = _api_error_message(payload)
    if api_message is not None:
        raise MalformedResponseError(f"API error: {api_message}")
    if not isinstance(payload, list) or len(payload) < 2 or not isinstance(payload[1], list):
        raise MalformedResponseError("expected a [metadata, records] array")

    records = [record for record in map(parse_record, payload[1]) if record is not None]
    dropped = len(payload[1]) - len(records)
    if dropped:
        logger.info("Dropped %d malformed records out of %d", dropped, len(payload[1]))
    return records


def parse_indicator_payload(payload: Any) -> FetchState:
    """Parses a response into Success(records) or Error(message). Never raises."""
    try:
        records = parse_records(payload)
    except MalformedResponseError as e:
        logger.warning("Rejected indicator response: %s", e)
        return Error(e.user_message)

    if not records:
        return Error(NO_DATA_MESSAGE)
    return Success(records)
