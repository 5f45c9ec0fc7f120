"""
Shared HTTP plumbing for the API clients.

Wraps requests so callers only ever see APIClientError subclasses.
"""

import logging
from typing import Any

import requests

from api.exceptions import APIConnectionError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def new_http_session() -> requests.Session:
    """requests.Session preloaded with JSON headers."""
    http = requests.Session()
    http.headers.update(DEFAULT_HEADERS)
    return http


def join_url(base_url: str, path: str) -> str:
    """Join API base and endpoint path with exactly one slash between."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def send(
    http: requests.Session,
    method: str,
    url: str,
    timeout: float,
    **kwargs: Any,
) -> requests.Response:
    """
    Send one HTTP request.

    Raises:
        APIConnectionError: If no response was received
    """
    try:
        return http.request(method, url, timeout=timeout, **kwargs)
    except (requests.exceptions.RequestException, ConnectionError) as e:
        logger.error(f"{method} {url} failed: {e}")
        raise APIConnectionError(f"Connection failed: {e}") from e
