"""Client-side session and authentication modules."""

from auth.exceptions import (
    AuthError,
    NotAuthenticatedError,
    ReauthenticationRequired,
)
from auth.types import (
    User,
    AuthTokens,
    TokenResponse,
    RegisterData,
    SessionState,
)
from auth.config import ClientConfig
from auth.security_logger import SecurityLogger, SecurityEvent
