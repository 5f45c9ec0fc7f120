"""Errors raised by HTTP calls to the shortlink API."""

from typing import Any


class APIClientError(Exception):
    """Base class for any failed call to the backend."""


class APIConnectionError(APIClientError):
    """Request never got a response (DNS, refused connection, timeout)."""


class APIRequestError(APIClientError):
    """
    Backend answered with a non-2xx status.

    Carries the machine-readable code and message from the error body when
    the backend sent one.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: str | None = None,
        payload: dict[str, Any] | None = None,
    ):
        self.status_code = status_code
        self.message = message
        self.code = code
        self.payload = payload or {}
        super().__init__(f"HTTP {status_code}: {message}")

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401
