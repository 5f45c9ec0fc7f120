"""
Client for the /urls endpoints.

All calls go through AuthenticatedGateway, so protected endpoints get a
valid bearer token and transparent refresh.
"""

import logging

from api.base import APIResponse
from clients.gateway import AuthenticatedGateway
from core.models import Link, LinkCreate, LinkUpdate, LinkQuery, LinkPage, LinkStats

logger = logging.getLogger(__name__)


class LinksClient:
    """Typed wrappers over the short link REST endpoints."""

    def __init__(self, gateway: AuthenticatedGateway):
        self._gateway = gateway

    def _envelope(self, method: str, path: str, **kwargs) -> APIResponse:
        return APIResponse.model_validate(self._gateway.request_json(method, path, **kwargs))

    def create_link(self, data: LinkCreate) -> Link:
        """Create a link owned by the logged-in user."""
        body = self._envelope("POST", "/urls", json=data.model_dump(mode="json", exclude_none=True))
        link = Link.model_validate(body.data)
        logger.info(f"Created link {link.short_code}")
        return link

    def create_public_link(self, data: LinkCreate) -> Link:
        """Create an anonymous link (no account needed)."""
        body = self._envelope(
            "POST", "/urls/public", json=data.model_dump(mode="json", exclude_none=True)
        )
        link = Link.model_validate(body.data)
        logger.info(f"Created public link {link.short_code}")
        return link

    def list_links(self, query: LinkQuery | None = None) -> LinkPage:
        """One page of the user's links, newest first by default."""
        query = query or LinkQuery()
        body = self._envelope("GET", "/urls", params=query.to_params())
        return LinkPage(
            links=[Link.model_validate(item) for item in body.data or []],
            pagination=body.pagination,
        )

    def get_link(self, link_id: int) -> Link:
        body = self._envelope("GET", f"/urls/{link_id}")
        return Link.model_validate(body.data)

    def update_link(self, link_id: int, data: LinkUpdate) -> Link:
        """Apply a partial update; unset fields are left as they are."""
        body = self._envelope(
            "PUT", f"/urls/{link_id}", json=data.model_dump(mode="json", exclude_none=True)
        )
        return Link.model_validate(body.data)

    def delete_link(self, link_id: int) -> APIResponse:
        """Delete a link. Returns the {success, message} acknowledgement."""
        body = self._envelope("DELETE", f"/urls/{link_id}")
        logger.info(f"Deleted link {link_id}")
        return body

    def get_link_stats(self, link_id: int) -> LinkStats:
        body = self._envelope("GET", f"/urls/{link_id}/stats")
        return LinkStats.model_validate(body.data)
