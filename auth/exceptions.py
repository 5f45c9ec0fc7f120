"""Typed exceptions for client auth failures."""


class AuthError(Exception):
    """Base class for authentication/authorization errors."""


class NotAuthenticatedError(AuthError):
    """Operation requires a logged-in session and none is held."""


class ReauthenticationRequired(AuthError):
    """
    Session could not be renewed and has been cleared.

    Raised by the gateway when a refresh fails, either before a request is
    sent (expired access token) or after the backend answered 401. The
    caller should send the user back to the login screen.
    """

    def __init__(self, message: str = "Session expired. Please log in again."):
        super().__init__(message)
