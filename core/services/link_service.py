"""
Link service for the shortening form and the link manager.

Input is checked before any request; backend failures become
OperationFailedError with a title/description pair for display.
ReauthenticationRequired is never caught here: the UI handles it by
returning to the login screen.
"""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from api.base import ErrorCodes
from api.errors import error_code, error_message
from api.exceptions import APIClientError
from auth.exceptions import NotAuthenticatedError
from auth.session import SessionStore
from clients.links_client import LinksClient
from core.exceptions import OperationFailedError
from core.models import Link, LinkCreate, LinkUpdate, LinkQuery, LinkPage, LinkStats
from core.validation import optional, parse_expiry, require

logger = logging.getLogger(__name__)

SHORT_CODE_EXISTS_TITLE = "Short code already exists"
SHORT_CODE_EXISTS_DESCRIPTION = (
    "Please choose a different short code or leave it empty for auto-generation"
)


@dataclass
class LinkForm:
    """Fields of the create-link form. Blank optional fields are not sent."""

    original_url: str
    short_code: str = ""
    expires_at: str = ""


@dataclass
class LinkEditForm:
    """Fields of the edit-link form."""

    original_url: str = ""
    expires_at: str = ""
    is_active: bool = True


class LinkService:
    """Create, browse, edit and delete short links."""

    PAGE_SIZE = 10

    def __init__(self, links: LinksClient, session: SessionStore, short_link_base_url: str):
        self._links = links
        self._session = session
        self._short_link_base_url = short_link_base_url.rstrip("/")

    def _require_login(self) -> None:
        """The manager views only load for a logged-in user."""
        if not self._session.is_authenticated:
            raise NotAuthenticatedError("Log in to manage your links")

    def _failed(self, title: str, e: APIClientError | ValidationError) -> OperationFailedError:
        logger.warning(f"{title}: {e}")
        return OperationFailedError(title, error_message(e), error_code(e))

    def shorten(self, form: LinkForm, public: bool = False) -> Link:
        """
        Create a short link.

        Logged-in users get a link on their account unless public is set;
        everyone else goes through the public endpoint.

        Raises:
            FormValidationError: URL missing or expiry malformed (nothing sent)
            OperationFailedError: Backend rejected the link
        """
        data = LinkCreate(
            original_url=require(form.original_url, "URL is required"),
            short_code=optional(form.short_code),
            expires_at=parse_expiry(form.expires_at),
        )

        use_public = public or not self._session.is_authenticated
        title = "Failed to shorten URL" if use_public else "Failed to create URL"

        try:
            if use_public:
                return self._links.create_public_link(data)
            return self._links.create_link(data)
        except (APIClientError, ValidationError) as e:
            if error_code(e) == ErrorCodes.SHORT_CODE_ALREADY_EXISTS:
                raise OperationFailedError(
                    SHORT_CODE_EXISTS_TITLE,
                    SHORT_CODE_EXISTS_DESCRIPTION,
                    ErrorCodes.SHORT_CODE_ALREADY_EXISTS,
                ) from e
            raise self._failed(title, e) from e

    def list_page(self, page: int = 1, search: str = "", limit: int = PAGE_SIZE) -> LinkPage:
        """One page of the user's links, newest first, optionally filtered."""
        self._require_login()
        query = LinkQuery(page=page, limit=limit, search=optional(search))
        try:
            return self._links.list_links(query)
        except (APIClientError, ValidationError) as e:
            raise self._failed("Error loading URLs", e) from e

    def get(self, link_id: int) -> Link:
        self._require_login()
        try:
            return self._links.get_link(link_id)
        except (APIClientError, ValidationError) as e:
            raise self._failed("Failed to load URL", e) from e

    def update(self, link_id: int, form: LinkEditForm) -> Link:
        """Save the edit form; blank text fields keep their current value."""
        self._require_login()
        data = LinkUpdate(
            original_url=optional(form.original_url),
            expires_at=parse_expiry(form.expires_at),
            is_active=form.is_active,
        )
        try:
            return self._links.update_link(link_id, data)
        except (APIClientError, ValidationError) as e:
            raise self._failed("Failed to update URL", e) from e

    def delete(self, link_id: int) -> str:
        """Delete a link; returns the backend's confirmation message."""
        self._require_login()
        try:
            result = self._links.delete_link(link_id)
        except (APIClientError, ValidationError) as e:
            raise self._failed("Failed to delete URL", e) from e
        return result.message or "URL deleted successfully"

    def stats(self, link_id: int) -> LinkStats:
        self._require_login()
        try:
            return self._links.get_link_stats(link_id)
        except (APIClientError, ValidationError) as e:
            raise self._failed("Failed to load URL statistics", e) from e

    def short_url(self, short_code: str) -> str:
        """Public URL that redirects to the original."""
        return f"{self._short_link_base_url}/{short_code}"
