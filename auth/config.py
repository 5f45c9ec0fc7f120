"""Client configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "SHORTLINK_"


class ClientConfig(BaseModel):
    """
    Shortlink client configuration.

    Every field can be overridden from the environment with the
    SHORTLINK_ prefix (e.g. SHORTLINK_API_BASE_URL).
    """

    # Backend
    api_base_url: str = Field(
        default="http://localhost:8080/api/v1",
        description="Base URL of the REST API, including the version prefix",
    )
    public_base_url: str | None = Field(
        default=None,
        description="Base URL for short links; derived from api_base_url when unset",
    )
    request_timeout_seconds: float = Field(
        default=10,
        description="Timeout applied to every HTTP call",
        ge=1,
        le=120,
    )

    # Session persistence
    session_storage_key: str = Field(
        default="auth",
        description="Fixed key the session record is stored under",
        min_length=1,
    )
    session_file: Path = Field(
        default=Path.home() / ".shortlink" / "session.json",
        description="JSON file used when no Valkey URL is configured",
    )
    valkey_url: str | None = Field(
        default=None,
        description="Store the session in Valkey instead of a local file",
    )

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> "ClientConfig":
        """
        Build config from environment variables.

        Loads a .env file first (existing variables win). Unset variables
        fall back to field defaults.
        """
        load_dotenv(env_file)

        overrides = {}
        for name in cls.model_fields:
            value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if value:
                overrides[name] = value

        return cls(**overrides)

    @property
    def short_link_base_url(self) -> str:
        """Base URL that short codes are appended to."""
        if self.public_base_url:
            return self.public_base_url.rstrip("/")
        base = self.api_base_url.rstrip("/")
        if base.endswith("/api/v1"):
            base = base[: -len("/api/v1")]
        return base
