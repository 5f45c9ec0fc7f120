"""Unified API response envelope and error codes."""

import json
from typing import Any

import requests
from pydantic import BaseModel, Field

from api.exceptions import APIRequestError


class Pagination(BaseModel):
    """Paging metadata for list endpoints."""

    page: int
    limit: int
    total: int
    total_pages: int


class APIResponse(BaseModel):
    """
    Envelope the backend wraps resource responses in.

    Success: {success, message, data[, pagination]}.
    Failure: {success: false, error, code?, details?}.
    """

    success: bool = True
    message: str | None = None
    data: Any | None = None
    pagination: Pagination | None = None
    error: str | None = Field(default=None, description="Human-readable error")
    code: str | None = Field(default=None, description="Machine-readable error code")
    details: str | None = None


class ErrorCodes:
    """Backend error codes the client handles specially."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHORIZED = "UNAUTHORIZED"  # Deactivated account
    EMAIL_ALREADY_USED = "EMAIL_ALREADY_USED"
    SHORT_CODE_ALREADY_EXISTS = "SHORT_CODE_ALREADY_EXISTS"


def decode_json(response: requests.Response) -> dict[str, Any]:
    """Decode a JSON object body. Empty or non-JSON bodies decode to {}."""
    if not response.content:
        return {}
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        return {}
    return body if isinstance(body, dict) else {"data": body}


def raise_for_api_error(response: requests.Response) -> None:
    """
    Raise APIRequestError for a non-2xx response.

    Message preference: body "error", then body "message", then the HTTP
    reason phrase.
    """
    if response.ok:
        return

    payload = decode_json(response)
    message = (
        payload.get("error")
        or payload.get("message")
        or response.reason
        or f"Request failed with status {response.status_code}"
    )
    raise APIRequestError(
        status_code=response.status_code,
        message=str(message),
        code=payload.get("code"),
        payload=payload,
    )
