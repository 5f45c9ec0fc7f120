"""
End-to-end tests through the wired-up ShortlinkApp.

Covers the full login -> protected request -> refresh -> re-login cycle
with HTTP mocked by responses.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import responses

from auth.exceptions import ReauthenticationRequired
from auth.storage import FileSessionStorage, MemorySessionStorage, ValkeySessionStorage
from auth.types import AuthTokens
from core.bootstrap import ShortlinkApp, build_storage
from core.services.link_service import LinkForm

from conftest import LOGIN_URL, REFRESH_URL, URLS_URL, link_payload, past, token_payload


@pytest.fixture
def signals() -> list:
    return []


@pytest.fixture
def app(config, signals):
    shortlink = ShortlinkApp.create(config, on_reauthenticate=lambda: signals.append("login"))
    yield shortlink
    shortlink.close()


def listing() -> dict:
    return {
        "success": True,
        "data": [link_payload()],
        "pagination": {"page": 1, "limit": 10, "total": 1, "total_pages": 1},
    }


class TestBuildStorage:

    def test_file_storage_by_default(self, config):
        storage, valkey = build_storage(config)

        assert isinstance(storage, FileSessionStorage)
        assert valkey is None

    def test_valkey_when_configured(self, config):
        config = config.model_copy(update={"valkey_url": "redis://localhost:6379/0"})

        with patch("clients.valkey_client.redis.from_url", return_value=MagicMock()):
            storage, valkey = build_storage(config)

        assert isinstance(storage, ValkeySessionStorage)
        assert valkey is not None


class TestWiring:

    def test_single_session_shared(self, app):
        assert app.accounts._session is app.session
        assert app.gateway._session is app.session
        assert app.link_service._session is app.session

    def test_explicit_storage_wins(self, config):
        storage = MemorySessionStorage()
        shortlink = ShortlinkApp.create(config, storage=storage)
        try:
            assert shortlink.session._storage is storage
            assert shortlink.valkey is None
        finally:
            shortlink.close()


class TestSessionLifecycle:

    @responses.activate
    def test_login_then_protected_request(self, app):
        responses.add(responses.POST, LOGIN_URL, json=token_payload("access-1"), status=200)
        responses.add(responses.GET, URLS_URL, json=listing())

        app.accounts.login("testuser@example.com", "secret123")
        page = app.link_service.list_page()

        assert len(page.links) == 1
        assert responses.calls[1].request.headers["Authorization"] == "Bearer access-1"

    @responses.activate
    def test_session_survives_restart(self, config, app):
        responses.add(responses.POST, LOGIN_URL, json=token_payload("access-1"), status=200)
        app.accounts.login("testuser@example.com", "secret123")

        restarted = ShortlinkApp.create(config)
        try:
            assert restarted.session.access_token == "access-1"
            assert restarted.session.user.username == "testuser"
        finally:
            restarted.close()

    def test_persisted_envelope_layout(self, config, app):
        app.session.set_tokens(AuthTokens(access_token="a", refresh_token="r"))

        record = json.loads(config.session_file.read_text())

        assert record["auth"]["version"] == 0
        assert record["auth"]["state"]["access_token"] == "a"
        assert record["auth"]["state"]["refresh_token"] == "r"

    @responses.activate
    def test_expired_token_refreshed_transparently(self, app, signals):
        app.session.set_tokens(
            AuthTokens(access_token="old", refresh_token="refresh-0", expires_at=past())
        )
        responses.add(responses.POST, REFRESH_URL, json=token_payload("new"), status=200)
        responses.add(responses.GET, URLS_URL, json=listing())

        app.link_service.list_page()

        assert [c.request.url for c in responses.calls][0] == REFRESH_URL
        assert responses.calls[1].request.headers["Authorization"] == "Bearer new"
        assert app.session.access_token == "new"
        assert signals == []

    @responses.activate
    def test_expired_and_refresh_rejected(self, config, app, signals):
        app.session.set_tokens(
            AuthTokens(access_token="old", refresh_token="revoked", expires_at=past())
        )
        responses.add(responses.POST, REFRESH_URL, json={"error": "invalid"}, status=401)

        with pytest.raises(ReauthenticationRequired):
            app.link_service.list_page()

        assert app.session.is_authenticated is False
        assert app.accounts.current_user is None
        assert signals == ["login"]
        assert "auth" not in json.loads(config.session_file.read_text())

    @responses.activate
    def test_public_shortening_after_logout(self, app):
        responses.add(responses.POST, LOGIN_URL, json=token_payload(), status=200)
        responses.add(responses.POST, f"{URLS_URL}/public", json={"success": True, "data": link_payload()})

        app.accounts.login("testuser@example.com", "secret123")
        app.accounts.logout()
        link = app.link_service.shorten(LinkForm(original_url="https://example.com"))

        assert app.link_service.short_url(link.short_code).endswith("/abc123")
        assert "Authorization" not in responses.calls[1].request.headers
