"""Session event logging for the client-side auth audit trail.

Events go to the dedicated "shortlink.security" logger so applications can
route them separately. Tokens are never logged.
"""

import logging
from enum import Enum
from typing import Any


class SecurityEvent(Enum):
    """Client session event types."""

    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    REGISTERED = "registered"
    REGISTRATION_FAILED = "registration_failed"
    TOKEN_REFRESHED = "token_refreshed"
    TOKEN_REFRESH_FAILED = "token_refresh_failed"
    SESSION_CLEARED = "session_cleared"
    LOGGED_OUT = "logged_out"
    REAUTHENTICATION_REQUIRED = "reauthentication_required"


# Events that mean something went wrong; logged at WARNING
_FAILURE_EVENTS = {
    SecurityEvent.LOGIN_FAILED,
    SecurityEvent.REGISTRATION_FAILED,
    SecurityEvent.TOKEN_REFRESH_FAILED,
    SecurityEvent.REAUTHENTICATION_REQUIRED,
}


class SecurityLogger:
    """Structured logger for session lifecycle events."""

    LOGGER_NAME = "shortlink.security"

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(self.LOGGER_NAME)

    def log(
        self,
        event: SecurityEvent,
        email: str | None = None,
        user_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Emit one event. Extra fields are attached to the LogRecord."""
        level = logging.WARNING if event in _FAILURE_EVENTS else logging.INFO

        parts = [f"event={event.value}"]
        if user_id is not None:
            parts.append(f"user_id={user_id}")
        if email:
            parts.append(f"email={email}")
        if details:
            parts.extend(f"{key}={value}" for key, value in sorted(details.items()))

        self._logger.log(
            level,
            " ".join(parts),
            extra={
                "security_event": event.value,
                "user_id": user_id,
                "email": email,
                "details": details or {},
            },
        )
