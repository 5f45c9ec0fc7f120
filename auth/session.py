"""Client session state: tokens and profile of the logged-in user.

One SessionStore is owned by the application root and handed to everything
that issues requests. The current record is an immutable SessionState that
is swapped wholesale on every change, and written to storage before the swap.
"""

import logging
import threading
from datetime import datetime

from pydantic import ValidationError

from api.exceptions import APIClientError, APIRequestError
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.storage import SessionStorage
from auth.types import AuthTokens, RegisterData, SessionState, TokenResponse, User
from clients.auth_client import AuthClient

logger = logging.getLogger(__name__)

_EMPTY = SessionState()


class SessionStore:
    """Single source of truth for the current credentials and profile.

    Restored from storage at construction; every mutation is persisted.
    """

    def __init__(
        self,
        storage: SessionStorage,
        auth_client: AuthClient,
        security_logger: SecurityLogger | None = None,
    ):
        self._storage = storage
        self._auth_client = auth_client
        self._security_logger = security_logger or SecurityLogger()
        self._lock = threading.Lock()
        self._state = self._restore()

    def _restore(self) -> SessionState:
        """Load the persisted session; anything unusable means logged out."""
        data = self._storage.load()
        if data is None:
            return _EMPTY
        try:
            state = SessionState.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Discarding invalid persisted session: {e.error_count()} errors")
            return _EMPTY
        logger.info(f"Restored session (authenticated={state.is_authenticated})")
        return state

    def _replace(self, state: SessionState) -> None:
        """Persist then publish a new record. Caller holds the lock."""
        if state == _EMPTY:
            self._storage.clear()
        else:
            self._storage.save(state.model_dump(mode="json"))
        self._state = state

    def _apply(self, result: TokenResponse) -> None:
        tokens = result.tokens()
        with self._lock:
            self._replace(
                SessionState(
                    access_token=tokens.access_token,
                    refresh_token=tokens.refresh_token,
                    expires_at=tokens.expires_at,
                    user=result.user,
                )
            )

    # === Read access ===

    def snapshot(self) -> SessionState:
        """The current record. Immutable, safe to hold across calls."""
        return self._state

    @property
    def access_token(self) -> str | None:
        return self._state.access_token

    @property
    def refresh_token(self) -> str | None:
        return self._state.refresh_token

    @property
    def expires_at(self) -> datetime | None:
        return self._state.expires_at

    @property
    def user(self) -> User | None:
        return self._state.user

    @property
    def is_authenticated(self) -> bool:
        """Computed from the current record on every read."""
        return self._state.is_authenticated

    def is_access_token_expired(self, now: datetime | None = None) -> bool:
        """True iff an expiry is known and lies strictly in the past."""
        return self._state.is_expired(now)

    # === Mutations ===

    def set_tokens(self, tokens: AuthTokens) -> None:
        """Replace access token, refresh token and expiry together. No format checks."""
        with self._lock:
            self._replace(
                self._state.model_copy(
                    update={
                        "access_token": tokens.access_token,
                        "refresh_token": tokens.refresh_token,
                        "expires_at": tokens.expires_at,
                    }
                )
            )

    def set_user(self, user: User | None) -> None:
        """Replace the profile (no merge)."""
        with self._lock:
            self._replace(self._state.model_copy(update={"user": user}))

    def login(self, email: str, password: str) -> User:
        """Log in and adopt the returned tokens and profile.

        Raises whatever the auth client raised (ValidationError for an unreadable
        success body); the session is untouched on failure.
        """
        try:
            result = self._auth_client.login(email, password)
        except (APIClientError, ValidationError) as e:
            self._security_logger.log(
                SecurityEvent.LOGIN_FAILED,
                email=email,
                details={"code": getattr(e, "code", None) or type(e).__name__},
            )
            raise

        self._apply(result)
        self._security_logger.log(
            SecurityEvent.LOGIN_SUCCEEDED, email=result.user.email, user_id=result.user.id
        )
        return result.user

    def register(self, data: RegisterData) -> User:
        """Create an account and log in with the tokens the backend returns."""
        try:
            result = self._auth_client.register(data)
        except (APIClientError, ValidationError) as e:
            self._security_logger.log(
                SecurityEvent.REGISTRATION_FAILED,
                email=data.email,
                details={"code": getattr(e, "code", None) or type(e).__name__},
            )
            raise

        self._apply(result)
        self._security_logger.log(
            SecurityEvent.REGISTERED, email=result.user.email, user_id=result.user.id
        )
        return result.user

    def refresh_access_token(self) -> bool:
        """Trade the refresh token for a new token pair.

        Returns False without any network call when no refresh token is held.
        A rejected refresh, an unreachable backend, an unreadable response or a
        failed write of the new tokens all count as failure: the refresh token
        can no longer be trusted, so the whole session is cleared.
        """
        refresh_token = self._state.refresh_token
        if not refresh_token:
            return False

        try:
            result = self._auth_client.refresh(refresh_token)
            self._apply(result)
        except (APIClientError, ValidationError, OSError) as e:
            reason = e.code if isinstance(e, APIRequestError) and e.code else type(e).__name__
            logger.error(f"Token refresh failed: {e}")
            self._security_logger.log(
                SecurityEvent.TOKEN_REFRESH_FAILED,
                user_id=self._state.user.id if self._state.user else None,
                details={"reason": reason},
            )
            self._clear(SecurityEvent.SESSION_CLEARED)
            return False

        self._security_logger.log(SecurityEvent.TOKEN_REFRESHED, user_id=result.user.id)
        return True

    def logout(self) -> None:
        """Forget all credentials. No network call."""
        self._clear(SecurityEvent.LOGGED_OUT)

    def _clear(self, event: SecurityEvent) -> None:
        with self._lock:
            user = self._state.user
            self._replace(_EMPTY)
        self._security_logger.log(event, user_id=user.id if user else None)
