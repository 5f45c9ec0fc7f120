"""
Account service: login, registration and logout for the UI layer.

Validates form input before any request, delegates to SessionStore, and
turns backend failures into the messages the forms display.
"""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from api.base import ErrorCodes
from api.errors import backend_error_text, error_code
from api.exceptions import APIClientError
from auth.session import SessionStore
from auth.types import RegisterData, User
from core.exceptions import OperationFailedError
from core.validation import require, validate_email, validate_registration

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = (
    "Invalid email or password. Please check your credentials and try again."
)
ACCOUNT_DEACTIVATED_MESSAGE = "Your account has been deactivated. Please contact support."
LOGIN_FAILED_MESSAGE = "Login failed. Please try again."
EMAIL_ALREADY_USED_MESSAGE = (
    "This email or username is already registered. "
    "Please use a different email or username."
)
REGISTRATION_FAILED_MESSAGE = "Registration failed. Please try again."


@dataclass
class RegistrationForm:
    """Fields of the sign-up form."""

    email: str
    username: str
    password: str
    confirm_password: str
    full_name: str


class AccountService:
    """Login/register/logout with user-facing error messages."""

    def __init__(self, session: SessionStore):
        self._session = session

    def login(self, email: str, password: str) -> User:
        """
        Log in with email and password.

        Raises:
            FormValidationError: Missing or malformed input (nothing sent)
            OperationFailedError: Backend rejected the login; session untouched
        """
        email = validate_email(email)
        require(password, "Password is required")

        try:
            return self._session.login(email, password)
        except (APIClientError, ValidationError) as e:
            code = error_code(e)
            if code == ErrorCodes.INVALID_CREDENTIALS:
                message = INVALID_CREDENTIALS_MESSAGE
            elif code == ErrorCodes.UNAUTHORIZED:
                message = ACCOUNT_DEACTIVATED_MESSAGE
            else:
                message = backend_error_text(e) or LOGIN_FAILED_MESSAGE
            raise OperationFailedError("Login failed", message, code) from e

    def register(self, form: RegistrationForm) -> User:
        """
        Create an account and log in.

        Raises:
            FormValidationError: Form problems (nothing sent)
            OperationFailedError: Backend rejected the registration
        """
        email = validate_email(form.email)
        username = require(form.username, "Username is required")
        full_name = require(form.full_name, "Full name is required")
        require(form.password, "Password is required")
        validate_registration(username, form.password, form.confirm_password)

        data = RegisterData(
            email=email,
            username=username,
            password=form.password,
            full_name=full_name,
        )

        try:
            return self._session.register(data)
        except (APIClientError, ValidationError) as e:
            code = error_code(e)
            if code == ErrorCodes.EMAIL_ALREADY_USED:
                message = EMAIL_ALREADY_USED_MESSAGE
            else:
                message = backend_error_text(e) or REGISTRATION_FAILED_MESSAGE
            raise OperationFailedError("Registration failed", message, code) from e

    def logout(self) -> None:
        self._session.logout()
        logger.info("User logged out")

    @property
    def current_user(self) -> User | None:
        """Profile of the logged-in user; None when logged out."""
        if not self._session.is_authenticated:
            return None
        return self._session.user
