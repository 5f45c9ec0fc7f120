"""Short link domain models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from api.base import Pagination


class LinkCreate(BaseModel):
    """Data required to create a short link."""

    original_url: str = Field(..., min_length=1)
    short_code: str | None = Field(default=None, description="Custom code; generated when omitted")
    expires_at: datetime | None = None


class LinkUpdate(BaseModel):
    """Partial update; only set fields are sent."""

    original_url: str | None = None
    expires_at: datetime | None = None
    is_active: bool | None = None


class Link(BaseModel):
    """Short link as stored by the backend."""

    id: int
    original_url: str
    short_code: str
    user_id: int | None = None
    expires_at: datetime | None = None
    click_count: int = 0
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class LinkQuery(BaseModel):
    """Filters and paging for the link list."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    search: str | None = None
    is_active: bool | None = None
    sort_by: str = "created_at"
    sort_dir: Literal["asc", "desc"] = "desc"

    def to_params(self) -> dict[str, str | int]:
        """Query string parameters; unset filters are omitted."""
        params = self.model_dump(exclude_none=True)
        if "is_active" in params:
            params["is_active"] = "true" if params["is_active"] else "false"
        if not params.get("search"):
            params.pop("search", None)
        return params


class LinkPage(BaseModel):
    """One page of the link list."""

    links: list[Link]
    pagination: Pagination


class ClickEvent(BaseModel):
    """One recorded visit of a short link."""

    id: int
    url_id: int
    ip_address: str
    user_agent: str
    referer: str | None = None
    clicked_at: datetime


class LinkStats(BaseModel):
    """Link with its recent click history."""

    url_response: Link
    recent_clicks: list[ClickEvent] = Field(default_factory=list)
