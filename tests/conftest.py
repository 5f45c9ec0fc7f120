"""Shared test fixtures for the shortlink client test suite."""

from datetime import timedelta

import pytest

from auth.config import ClientConfig
from auth.security_logger import SecurityLogger
from auth.session import SessionStore
from auth.storage import FileSessionStorage
from auth.types import AuthTokens, User
from clients.auth_client import AuthClient
from clients.gateway import AuthenticatedGateway
from clients.links_client import LinksClient
from utils.timezone import now_utc


# =============================================================================
# TEST CONSTANTS
# =============================================================================

API_BASE = "https://api.shortlink.example.com/api/v1"
LOGIN_URL = f"{API_BASE}/auth/login"
REGISTER_URL = f"{API_BASE}/auth/register"
REFRESH_URL = f"{API_BASE}/auth/refresh"
URLS_URL = f"{API_BASE}/urls"

TEST_USER = {
    "id": 1,
    "email": "testuser@example.com",
    "username": "testuser",
    "full_name": "Test User",
    "is_active": True,
}


def future(hours: int = 1):
    return now_utc() + timedelta(hours=hours)


def past(hours: int = 1):
    return now_utc() - timedelta(hours=hours)


def token_payload(
    token: str = "access-1",
    refresh_token: str = "refresh-1",
    expires_at=None,
    user: dict | None = None,
) -> dict:
    """Body of a successful /auth/login, /auth/register or /auth/refresh."""
    return {
        "token": token,
        "refresh_token": refresh_token,
        "expires_at": (expires_at or future()).isoformat(),
        "user": user or TEST_USER,
    }


def link_payload(link_id: int = 1, short_code: str = "abc123", **overrides) -> dict:
    """A link as the backend serializes it."""
    link = {
        "id": link_id,
        "original_url": "https://example.com/some/long/path",
        "short_code": short_code,
        "user_id": 1,
        "expires_at": None,
        "click_count": 0,
        "is_active": True,
        "created_at": "2024-01-01T12:00:00Z",
        "updated_at": "2024-01-01T12:00:00Z",
    }
    link.update(overrides)
    return link


# =============================================================================
# COMPONENT FIXTURES
# =============================================================================


@pytest.fixture
def config(tmp_path) -> ClientConfig:
    return ClientConfig(
        api_base_url=API_BASE,
        session_file=tmp_path / "session.json",
    )


@pytest.fixture
def storage(config):
    return FileSessionStorage(config.session_file, key=config.session_storage_key)


@pytest.fixture
def security_logger():
    return SecurityLogger()


@pytest.fixture
def auth_client(config):
    client = AuthClient(config.api_base_url, timeout=config.request_timeout_seconds)
    yield client
    client.close()


@pytest.fixture
def session_store(storage, auth_client, security_logger) -> SessionStore:
    return SessionStore(storage, auth_client, security_logger)


@pytest.fixture
def reauth_calls() -> list:
    """Records every re-authenticate signal the gateway fires."""
    return []


@pytest.fixture
def gateway(session_store, config, reauth_calls, security_logger):
    gw = AuthenticatedGateway(
        session_store,
        config.api_base_url,
        timeout=config.request_timeout_seconds,
        on_reauthenticate=lambda: reauth_calls.append(True),
        security_logger=security_logger,
    )
    yield gw
    gw.close()


@pytest.fixture
def links_client(gateway) -> LinksClient:
    return LinksClient(gateway)


@pytest.fixture
def test_user() -> User:
    return User.model_validate(TEST_USER)


@pytest.fixture
def logged_in(session_store, test_user) -> SessionStore:
    """Session holding a valid (unexpired) token pair."""
    session_store.set_tokens(
        AuthTokens(access_token="access-0", refresh_token="refresh-0", expires_at=future())
    )
    session_store.set_user(test_user)
    return session_store


@pytest.fixture
def expired(session_store, test_user) -> SessionStore:
    """Session whose access token expired an hour ago."""
    session_store.set_tokens(
        AuthTokens(access_token="access-0", refresh_token="refresh-0", expires_at=past())
    )
    session_store.set_user(test_user)
    return session_store
