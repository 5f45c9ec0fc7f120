"""Errors surfaced to the UI layer by the core services."""


class FormValidationError(ValueError):
    """Input rejected before any request was sent."""


class OperationFailedError(Exception):
    """
    A backend operation failed; carries text ready to show the user.

    title is the short headline ("Failed to create URL"), description the
    detail line. code is the backend error code when there was one.
    """

    def __init__(self, title: str, description: str | None = None, code: str | None = None):
        self.title = title
        self.description = description
        self.code = code
        super().__init__(f"{title}: {description}" if description else title)

    @property
    def message(self) -> str:
        """Single-line text for inline form errors."""
        return self.description or self.title
