"""Tests for LinksClient - typed wrappers over the /urls endpoints."""

import json

import pytest
import responses
from responses import matchers

from api.exceptions import APIRequestError
from core.models import LinkCreate, LinkQuery, LinkUpdate

from conftest import URLS_URL, link_payload


def envelope(data, **extra) -> dict:
    return {"success": True, "message": "ok", "data": data, **extra}


class TestCreate:

    @responses.activate
    def test_create_link_authenticated(self, links_client, logged_in):
        responses.add(responses.POST, URLS_URL, json=envelope(link_payload()), status=201)

        link = links_client.create_link(LinkCreate(original_url="https://example.com/some/long/path"))

        assert link.short_code == "abc123"
        request = responses.calls[0].request
        assert request.headers["Authorization"] == "Bearer access-0"
        assert json.loads(request.body) == {"original_url": "https://example.com/some/long/path"}

    @responses.activate
    def test_create_public_link(self, links_client):
        responses.add(
            responses.POST,
            f"{URLS_URL}/public",
            json=envelope(link_payload(user_id=None)),
            status=201,
        )

        link = links_client.create_public_link(
            LinkCreate(original_url="https://example.com", short_code="mine")
        )

        assert link.user_id is None
        assert json.loads(responses.calls[0].request.body) == {
            "original_url": "https://example.com",
            "short_code": "mine",
        }

    @responses.activate
    def test_conflict_raises_with_code(self, links_client):
        responses.add(
            responses.POST,
            f"{URLS_URL}/public",
            json={"success": False, "error": "short code taken", "code": "SHORT_CODE_ALREADY_EXISTS"},
            status=409,
        )

        with pytest.raises(APIRequestError) as exc_info:
            links_client.create_public_link(LinkCreate(original_url="https://example.com", short_code="x"))

        assert exc_info.value.code == "SHORT_CODE_ALREADY_EXISTS"


class TestList:

    @responses.activate
    def test_default_query(self, links_client, logged_in):
        responses.add(
            responses.GET,
            URLS_URL,
            match=[
                matchers.query_param_matcher(
                    {"page": "1", "limit": "10", "sort_by": "created_at", "sort_dir": "desc"}
                )
            ],
            json=envelope(
                [link_payload(1), link_payload(2, short_code="def456")],
                pagination={"page": 1, "limit": 10, "total": 2, "total_pages": 1},
            ),
        )

        page = links_client.list_links()

        assert [link.id for link in page.links] == [1, 2]
        assert page.pagination.total == 2

    @responses.activate
    def test_filters_are_sent(self, links_client, logged_in):
        responses.add(
            responses.GET,
            URLS_URL,
            match=[
                matchers.query_param_matcher(
                    {
                        "page": "3",
                        "limit": "5",
                        "search": "docs",
                        "is_active": "false",
                        "sort_by": "click_count",
                        "sort_dir": "asc",
                    }
                )
            ],
            json=envelope([], pagination={"page": 3, "limit": 5, "total": 0, "total_pages": 0}),
        )

        page = links_client.list_links(
            LinkQuery(page=3, limit=5, search="docs", is_active=False, sort_by="click_count", sort_dir="asc")
        )

        assert page.links == []


class TestSingleLink:

    @responses.activate
    def test_get_link(self, links_client, logged_in):
        responses.add(responses.GET, f"{URLS_URL}/7", json=envelope(link_payload(7)))

        assert links_client.get_link(7).id == 7

    @responses.activate
    def test_update_sends_only_set_fields(self, links_client, logged_in):
        responses.add(
            responses.PUT,
            f"{URLS_URL}/7",
            json=envelope(link_payload(7, is_active=False)),
        )

        link = links_client.update_link(7, LinkUpdate(is_active=False))

        assert link.is_active is False
        assert json.loads(responses.calls[0].request.body) == {"is_active": False}

    @responses.activate
    def test_delete_returns_acknowledgement(self, links_client, logged_in):
        responses.add(
            responses.DELETE,
            f"{URLS_URL}/7",
            json={"success": True, "message": "URL deleted successfully"},
        )

        result = links_client.delete_link(7)

        assert result.success is True
        assert result.message == "URL deleted successfully"

    @responses.activate
    def test_stats(self, links_client, logged_in):
        responses.add(
            responses.GET,
            f"{URLS_URL}/7/stats",
            json=envelope(
                {
                    "url_response": link_payload(7, click_count=2),
                    "recent_clicks": [
                        {
                            "id": 1,
                            "url_id": 7,
                            "ip_address": "203.0.113.5",
                            "user_agent": "curl/8.0",
                            "clicked_at": "2024-01-02T08:00:00Z",
                        }
                    ],
                }
            ),
        )

        stats = links_client.get_link_stats(7)

        assert stats.url_response.click_count == 2
        assert stats.recent_clicks[0].referer is None

    @responses.activate
    def test_not_found_raises(self, links_client, logged_in):
        responses.add(
            responses.GET,
            f"{URLS_URL}/99",
            json={"success": False, "error": "URL not found"},
            status=404,
        )

        with pytest.raises(APIRequestError) as exc_info:
            links_client.get_link(99)

        assert exc_info.value.status_code == 404
