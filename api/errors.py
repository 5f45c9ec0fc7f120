"""User-facing text for API failures."""

from pydantic import ValidationError

from api.exceptions import APIRequestError

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


def error_code(exc: BaseException) -> str | None:
    """Backend error code carried by exc, if any."""
    if isinstance(exc, APIRequestError):
        return exc.code
    return None


def error_message(exc: BaseException, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
    """
    Best-available message for exc.

    For an HTTP error: backend "message", backend "error", the message the
    error was raised with, fallback. A response body that did not match the
    expected shape (ValidationError) has no text worth showing: fallback.
    Anything else: the exception text, fallback.
    """
    if isinstance(exc, APIRequestError):
        for key in ("message", "error"):
            value = exc.payload.get(key)
            if value:
                return str(value)
        return exc.message or fallback

    if isinstance(exc, ValidationError):
        return fallback

    return str(exc) or fallback


def backend_error_text(exc: BaseException) -> str | None:
    """The body "error" field only; forms show it verbatim when present."""
    if isinstance(exc, APIRequestError):
        value = exc.payload.get("error")
        if value:
            return str(value)
    return None
