"""Application root: builds and owns every client-side component.

There is exactly one SessionStore per ShortlinkApp; the gateway, the
services and the UI all receive it from here.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from auth.config import ClientConfig
from auth.security_logger import SecurityLogger
from auth.session import SessionStore
from auth.storage import FileSessionStorage, SessionStorage, ValkeySessionStorage
from clients.auth_client import AuthClient
from clients.gateway import AuthenticatedGateway
from clients.links_client import LinksClient
from clients.valkey_client import ValkeyClient
from core.services.account_service import AccountService
from core.services.link_service import LinkService

logger = logging.getLogger(__name__)


def build_storage(config: ClientConfig) -> tuple[SessionStorage, ValkeyClient | None]:
    """Valkey storage when a URL is configured, otherwise the session file."""
    if config.valkey_url:
        valkey = ValkeyClient(config.valkey_url)
        return ValkeySessionStorage(valkey, key=config.session_storage_key), valkey
    return FileSessionStorage(config.session_file, key=config.session_storage_key), None


@dataclass
class ShortlinkApp:
    """Container for the wired-up client."""

    config: ClientConfig
    session: SessionStore
    auth_client: AuthClient
    gateway: AuthenticatedGateway
    links: LinksClient
    accounts: AccountService
    link_service: LinkService
    valkey: ValkeyClient | None = field(default=None, repr=False)

    @classmethod
    def create(
        cls,
        config: ClientConfig | None = None,
        storage: SessionStorage | None = None,
        on_reauthenticate: Callable[[], None] | None = None,
    ) -> "ShortlinkApp":
        """
        Wire the client together.

        Args:
            config: Defaults to ClientConfig.from_env()
            storage: Overrides the storage backend chosen from config
            on_reauthenticate: Called when the user must log in again
        """
        config = config or ClientConfig.from_env()

        valkey = None
        if storage is None:
            storage, valkey = build_storage(config)

        security_logger = SecurityLogger()
        auth_client = AuthClient(config.api_base_url, timeout=config.request_timeout_seconds)
        session = SessionStore(storage, auth_client, security_logger)
        gateway = AuthenticatedGateway(
            session,
            config.api_base_url,
            timeout=config.request_timeout_seconds,
            on_reauthenticate=on_reauthenticate,
            security_logger=security_logger,
        )
        links = LinksClient(gateway)

        logger.info(f"Shortlink client ready: {config.api_base_url}")

        return cls(
            config=config,
            session=session,
            auth_client=auth_client,
            gateway=gateway,
            links=links,
            accounts=AccountService(session),
            link_service=LinkService(links, session, config.short_link_base_url),
            valkey=valkey,
        )

    def close(self) -> None:
        """Release HTTP connections (and the Valkey connection, if any)."""
        self.gateway.close()
        self.auth_client.close()
        if self.valkey is not None:
            self.valkey.close()
