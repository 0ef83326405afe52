# src/core/errors.py

import requests


class FetchError(Exception):
    """Base class for failures that end a fetch with a user-facing message."""

    user_message = "Failed to load data"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.user_message)
        self.detail = detail


class NetworkUnreachableError(FetchError):
    user_message = "No internet connection"


class RequestTimeoutError(FetchError):
    user_message = "Request timed out"


class MalformedResponseError(FetchError):
    user_message = "Invalid API response"


class InsufficientDataError(FetchError):
    user_message = "No valid data available"


def translate_request_error(exc: requests.RequestException) -> FetchError:
    """Maps a requests exception onto the fetch error taxonomy."""
    # ConnectTimeout is both a Timeout and a ConnectionError; treat it as a timeout.
    if isinstance(exc, requests.Timeout):
        return RequestTimeoutError(str(exc))
    if isinstance(exc, requests.ConnectionError):
        return NetworkUnreachableError(str(exc))
    if isinstance(exc, ValueError):
        # requests.JSONDecodeError
        return MalformedResponseError(str(exc))
    return FetchError(str(exc))


def describe_failure(exc: BaseException) -> str:
    """Returns the short message shown in an error panel for any exception."""
    if isinstance(exc, requests.RequestException):
        exc = translate_request_error(exc)
    if isinstance(exc, FetchError):
        return exc.user_message
    return FetchError.user_message
