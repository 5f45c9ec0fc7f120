"""
Client for the /auth endpoints.

These calls bypass the authenticated gateway entirely: they are how the
gateway obtains tokens, so routing them through it would recurse.
"""

import logging

import requests

from api.base import decode_json, raise_for_api_error
from auth.types import RegisterData, TokenResponse
from clients.transport import join_url, new_http_session, send

logger = logging.getLogger(__name__)


class AuthClient:
    """Login, register and token refresh against the backend."""

    LOGIN_PATH = "/auth/login"
    REGISTER_PATH = "/auth/register"
    REFRESH_PATH = "/auth/refresh"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10,
        http: requests.Session | None = None,
    ):
        """
        Args:
            base_url: API base URL, e.g. http://localhost:8080/api/v1
            timeout: Per-request timeout in seconds
            http: Session to send through (a fresh one if omitted)

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required")

        self.base_url = base_url
        self.timeout = timeout
        self._http = http or new_http_session()

    def _post(self, path: str, payload: dict) -> TokenResponse:
        response = send(
            self._http,
            "POST",
            join_url(self.base_url, path),
            self.timeout,
            json=payload,
        )
        raise_for_api_error(response)
        return TokenResponse.model_validate(decode_json(response))

    def login(self, email: str, password: str) -> TokenResponse:
        """
        Exchange credentials for tokens.

        Raises:
            APIRequestError: Backend rejected the credentials
            APIConnectionError: Backend unreachable
        """
        result = self._post(self.LOGIN_PATH, {"email": email, "password": password})
        logger.info(f"Logged in as user {result.user.id}")
        return result

    def register(self, data: RegisterData) -> TokenResponse:
        """Create an account; the backend answers with the same shape as login."""
        result = self._post(self.REGISTER_PATH, data.model_dump(mode="json"))
        logger.info(f"Registered user {result.user.id}")
        return result

    def refresh(self, refresh_token: str) -> TokenResponse:
        """Trade a refresh token for a new token pair."""
        return self._post(self.REFRESH_PATH, {"refresh_token": refresh_token})

    def close(self) -> None:
        self._http.close()
