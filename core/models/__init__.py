"""Core domain models."""

from core.models.link import (
    Link,
    LinkCreate,
    LinkUpdate,
    LinkQuery,
    LinkPage,
    LinkStats,
    ClickEvent,
)

__all__ = [
    "Link", "LinkCreate", "LinkUpdate", "LinkQuery", "LinkPage", "LinkStats", "ClickEvent",
]
