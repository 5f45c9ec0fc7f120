"""
Authenticated request gateway.

Every call to a protected endpoint goes through AuthenticatedGateway, which
makes token expiry invisible to callers:

    1. Before sending: attach the bearer token, refreshing first if the
       access token has already expired.
    2. After a 401: refresh once and resend the identical request once.
    3. If a refresh fails: clear the session, fire the re-authenticate
       callback and raise ReauthenticationRequired.

Paths under /auth/ are passed straight through; the refresh call itself
must never be intercepted.
"""

import logging
from enum import Enum
from typing import Any, Callable

import requests

from api.base import decode_json, raise_for_api_error
from api.exceptions import APIRequestError
from auth.exceptions import ReauthenticationRequired
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.session import SessionStore
from clients.transport import join_url, new_http_session, send

logger = logging.getLogger(__name__)


class RequestState(Enum):
    """Auth retry state of one logical request."""

    UNATTEMPTED = "unattempted"  # Sent at most once, no refresh yet
    REFRESHING = "refreshing"  # Got 401, refresh in progress
    RETRIED = "retried"  # Refreshed and resent; no further attempts


class AuthenticatedGateway:
    """HTTP gateway that keeps protected calls authenticated.

    At most one refresh and one automatic retry per request.
    """

    AUTH_PATH_MARKER = "/auth/"

    def __init__(
        self,
        session: SessionStore,
        base_url: str,
        timeout: float = 10,
        http: requests.Session | None = None,
        on_reauthenticate: Callable[[], None] | None = None,
        security_logger: SecurityLogger | None = None,
    ):
        """
        Args:
            session: The application's session store
            base_url: API base URL, e.g. http://localhost:8080/api/v1
            timeout: Per-request timeout in seconds
            http: Session to send through (a fresh one if omitted)
            on_reauthenticate: Called once whenever the user must log in again
            security_logger: Session event sink

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required")

        self._session = session
        self.base_url = base_url
        self.timeout = timeout
        self._http = http or new_http_session()
        self._on_reauthenticate = on_reauthenticate
        self._security_logger = security_logger or SecurityLogger()

    @classmethod
    def is_auth_endpoint(cls, path: str) -> bool:
        return cls.AUTH_PATH_MARKER in f"/{path.lstrip('/')}"

    def _reauthenticate(self) -> ReauthenticationRequired:
        """Clear the session and signal the UI. Returns the exception to raise.

        A failed refresh has already cleared the session itself; only a
        session that still holds a token is cleared here.
        """
        if self._session.is_authenticated:
            self._session.logout()
        self._security_logger.log(SecurityEvent.REAUTHENTICATION_REQUIRED)
        if self._on_reauthenticate is not None:
            self._on_reauthenticate()
        return ReauthenticationRequired()

    def _current_token(self) -> str | None:
        """Access token to attach, refreshing it first if it has expired.

        Raises:
            ReauthenticationRequired: Token expired and could not be refreshed
        """
        state = self._session.snapshot()
        if not state.access_token:
            return None

        if not state.is_expired():
            return state.access_token

        logger.info("Access token expired, refreshing before request")
        if not self._session.refresh_access_token():
            raise self._reauthenticate()

        return self._session.access_token

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """
        Send a request, keeping it authenticated.

        Args:
            method: HTTP verb
            path: Endpoint path relative to the API base
            **kwargs: Passed to requests (json, params, headers, ...)

        Returns:
            The 2xx response

        Raises:
            ReauthenticationRequired: Session could not be renewed (it is now cleared)
            APIRequestError: Backend answered with any other error status
            APIConnectionError: Backend unreachable
        """
        url = join_url(self.base_url, path)
        headers = dict(kwargs.pop("headers", None) or {})

        if self.is_auth_endpoint(path):
            response = send(self._http, method, url, self.timeout, headers=headers, **kwargs)
            raise_for_api_error(response)
            return response

        token = self._current_token()
        state = RequestState.UNATTEMPTED

        while True:
            if token:
                headers["Authorization"] = f"Bearer {token}"
            response = send(self._http, method, url, self.timeout, headers=headers, **kwargs)

            if response.status_code != 401 or state is not RequestState.UNATTEMPTED:
                break

            state = RequestState.REFRESHING
            logger.info(f"{method} {path} returned 401, refreshing token")

            if not self._session.refresh_access_token():
                try:
                    raise_for_api_error(response)
                except APIRequestError as e:
                    raise self._reauthenticate() from e

            token = self._session.access_token
            if not token:
                break
            state = RequestState.RETRIED

        raise_for_api_error(response)
        return response

    def request_json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Like request(), returning the decoded JSON body."""
        return decode_json(self.request(method, path, **kwargs))

    def get(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self._http.close()
