"""Pydantic models for the client-side auth domain."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from utils.timezone import is_past


class User(BaseModel):
    """Profile of the authenticated user, as returned by the backend."""

    id: int
    email: str
    username: str
    full_name: str
    is_active: bool = True


class AuthTokens(BaseModel):
    """Credentials issued by login, register and refresh."""

    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None


class TokenResponse(BaseModel):
    """Payload of /auth/login, /auth/register and /auth/refresh."""

    token: str = Field(..., description="Bearer access token (opaque)")
    refresh_token: str | None = None
    expires_at: datetime | None = None
    user: User

    def tokens(self) -> AuthTokens:
        return AuthTokens(
            access_token=self.token,
            refresh_token=self.refresh_token,
            expires_at=self.expires_at,
        )


class RegisterData(BaseModel):
    """Request payload for /auth/register."""

    email: EmailStr
    username: str
    password: str
    full_name: str


class SessionState(BaseModel):
    """
    Snapshot of the client session.

    Frozen: every change produces a new instance, so a reader holding a
    snapshot never sees a token paired with another token's expiry.
    """

    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: datetime | None = None
    user: User | None = None

    model_config = {"frozen": True}

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def is_expired(self, now: datetime | None = None) -> bool:
        """True iff an expiry is known and lies strictly before now."""
        return self.expires_at is not None and is_past(self.expires_at, now)
