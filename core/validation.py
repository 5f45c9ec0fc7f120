"""Form checks run before any network call."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, ValidationError

from core.exceptions import FormValidationError
from utils.timezone import parse_iso

MIN_PASSWORD_LENGTH = 6
MIN_USERNAME_LENGTH = 3


class _EmailField(BaseModel):
    email: EmailStr


def require(value: str | None, message: str) -> str:
    """Return value stripped; raise if blank."""
    if value is None or not value.strip():
        raise FormValidationError(message)
    return value.strip()


def validate_email(email: str) -> str:
    email = require(email, "Email is required")
    try:
        return _EmailField(email=email).email
    except ValidationError:
        raise FormValidationError("Please enter a valid email address")


def validate_registration(username: str, password: str, confirm_password: str) -> None:
    """
    Check the registration form. Reports the first problem found, in this
    order: password mismatch, password length, username length.
    """
    if password != confirm_password:
        raise FormValidationError("Passwords do not match")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise FormValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    if len(username) < MIN_USERNAME_LENGTH:
        raise FormValidationError(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters long"
        )


def optional(value: str | None) -> str | None:
    """Blank optional fields are dropped rather than sent empty."""
    if value is None or not value.strip():
        return None
    return value.strip()


def parse_expiry(value: str | datetime | None) -> datetime | None:
    """Expiry from a form field: blank -> None, else an ISO timestamp in UTC."""
    if isinstance(value, datetime):
        return value
    value = optional(value)
    if value is None:
        return None
    try:
        return parse_iso(value)
    except ValueError:
        raise FormValidationError("Expiry must be a valid date and time")
