"""Durable storage for the session record.

The record is kept under one fixed key, in the same envelope browser
local-storage persistence uses: {"state": {...}, "version": N}.
Backends only move dicts around; SessionStore owns (de)serialization.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from clients.valkey_client import ValkeyClient

logger = logging.getLogger(__name__)

STORAGE_VERSION = 0


class SessionStorage:
    """Interface for session persistence backends."""

    def load(self) -> dict | None:
        """Return the stored session state, or None if nothing usable is stored."""
        raise NotImplementedError

    def save(self, state: dict) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


def _unwrap(key: str, envelope: object) -> dict | None:
    """Pull the state dict out of a stored envelope; None if malformed."""
    if not isinstance(envelope, dict):
        logger.warning(f"Ignoring malformed session record under '{key}'")
        return None
    if envelope.get("version") != STORAGE_VERSION:
        logger.warning(
            f"Ignoring session record under '{key}' with version {envelope.get('version')}"
        )
        return None
    state = envelope.get("state")
    if not isinstance(state, dict):
        logger.warning(f"Ignoring session record under '{key}' without state")
        return None
    return state


class FileSessionStorage(SessionStorage):
    """Session record inside a JSON document on disk.

    The document maps storage keys to envelopes, so several apps can share
    one file. Writes go to a temp file that replaces the original.
    """

    def __init__(self, path: Path, key: str = "auth"):
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable session file {self.path}: {e}")
            return {}
        return document if isinstance(document, dict) else {}

    def _write_document(self, document: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".session-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def load(self) -> dict | None:
        envelope = self._read_document().get(self.key)
        if envelope is None:
            return None
        return _unwrap(self.key, envelope)

    def save(self, state: dict) -> None:
        document = self._read_document()
        document[self.key] = {"state": state, "version": STORAGE_VERSION}
        self._write_document(document)

    def clear(self) -> None:
        document = self._read_document()
        if self.key in document:
            del document[self.key]
            self._write_document(document)


class ValkeySessionStorage(SessionStorage):
    """Session record in a single Valkey key (no TTL; the backend owns expiry)."""

    KEY_PREFIX = "shortlink:"

    def __init__(self, valkey: ValkeyClient, key: str = "auth"):
        self._valkey = valkey
        self.key = key

    def _key(self) -> str:
        return f"{self.KEY_PREFIX}{self.key}"

    def load(self) -> dict | None:
        try:
            envelope = self._valkey.get_json(self._key())
        except ValueError as e:
            logger.warning(f"Unreadable session record in Valkey: {e}")
            return None
        if envelope is None:
            return None
        return _unwrap(self._key(), envelope)

    def save(self, state: dict) -> None:
        self._valkey.set_json(self._key(), {"state": state, "version": STORAGE_VERSION})

    def clear(self) -> None:
        self._valkey.delete(self._key())


class MemorySessionStorage(SessionStorage):
    """Process-local storage; nothing survives a restart."""

    def __init__(self):
        self._state: dict | None = None

    def load(self) -> dict | None:
        return dict(self._state) if self._state is not None else None

    def save(self, state: dict) -> None:
        self._state = dict(state)

    def clear(self) -> None:
        self._state = None
