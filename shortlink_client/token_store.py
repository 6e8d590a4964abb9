from __future__ import annotations

import json
import logging
import os
import threading
from typing import Callable, Mapping

from msal_extensions import FilePersistence, FilePersistenceWithDataProtection
from msal_extensions.persistence import PersistenceNotFound

from shortlink_client.models import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY

logger = logging.getLogger(__name__)


class TokenStore:
    """Key/value storage for the session tokens.

    Subclasses implement ``get``, ``set`` and ``remove``. ``replace`` writes several
    keys as one unit; the default falls back to individual writes.
    """

    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def replace(self, values: Mapping[str, str]) -> None:
        for key, value in values.items():
            self.set(key, value)


class InMemoryTokenStore(TokenStore):
    def __init__(self, initial: Mapping[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def replace(self, values: Mapping[str, str]) -> None:
        with self._lock:
            self._values.update(values)


class PersistedTokenStore(TokenStore):
    """Token store backed by a JSON document on disk.

    Every mutation rewrites the whole document, so ``replace`` lands both tokens
    in a single save.
    """

    def __init__(self, path: str):
        self._persistence = self._build_persistence(path)
        self._lock = threading.Lock()

    @staticmethod
    def _build_persistence(path: str):
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        try:
            return FilePersistenceWithDataProtection(path)
        except Exception:
            return FilePersistence(path)

    @property
    def location(self) -> str:
        return self._persistence.get_location()

    def get(self, key: str) -> str | None:
        with self._lock:
            value = self._load().get(key)
        return str(value) if value else None

    def set(self, key: str, value: str) -> None:
        self.replace({key: value})

    def remove(self, key: str) -> None:
        with self._lock:
            values = self._load()
            if key not in values:
                return
            del values[key]
            self._save(values)

    def replace(self, values: Mapping[str, str]) -> None:
        with self._lock:
            current = self._load()
            current.update(values)
            self._save(current)

    def _load(self) -> dict[str, str]:
        try:
            raw = self._persistence.load()
        except PersistenceNotFound:
            return {}
        if not raw:
            return {}
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Token store at %s is not valid JSON; treating it as empty", self.location)
            return {}
        if not isinstance(parsed, dict):
            return {}
        return parsed

    def _save(self, values: Mapping[str, str]) -> None:
        self._persistence.save(json.dumps(dict(values)))


def build_session_terminator(
    token_store: TokenStore,
    on_logged_out: Callable[[], None] | None = None,
) -> Callable[[], None]:
    """Return the action run when a session cannot be recovered.

    It clears both tokens and then hands control to ``on_logged_out`` (typically
    the UI switching to its login screen). Calling it again is harmless.
    """

    def terminate_session() -> None:
        token_store.remove(ACCESS_TOKEN_KEY)
        token_store.remove(REFRESH_TOKEN_KEY)
        logger.info("Session terminated; stored tokens cleared")
        if on_logged_out is not None:
            on_logged_out()

    return terminate_session
