from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, Optional, Protocol

EXCHANGE_TOKEN_KEY = "shopify_exchange_token"
SHOP_KEY = "shop"

DEFAULT_STORE_PATH = Path.home() / ".config" / "shopify-admin-api" / "db.json"

log = logging.getLogger("shopify_admin_api.core.store")


class CredentialStore(Protocol):
    def get(
        self, key: str, fallback: Optional[Callable[[], Any]] = None
    ) -> Optional[Any]: ...

    def set(self, key: str, value: Optional[Any]) -> None: ...

    def exists(self, key: str) -> bool: ...

    def clear(self, key: str) -> None: ...

    def override(self, key: str, value: Any): ...

    def guard(self, key: str): ...


class InMemoryCredentialStore:
    """
    Process-wide key/value store for credentials and session values.
    - ``get`` with a fallback computes, stores and returns the value when absent
    - ``set(key, None)`` removes the key
    - ``override`` is the only way to substitute a value for one call; ``guard``
      and ``override`` share one lock per key
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})
        self._key_locks: Dict[str, asyncio.Lock] = {}

    def _read(self) -> Dict[str, Any]:
        return self._data

    def _write(self, data: Dict[str, Any]) -> None:
        self._data = data

    def get(
        self, key: str, fallback: Optional[Callable[[], Any]] = None
    ) -> Optional[Any]:
        data = self._read()
        if key in data:
            return data[key]
        if fallback is None:
            return None
        value = fallback()
        if value is not None:
            self.set(key, value)
        return value

    def set(self, key: str, value: Optional[Any]) -> None:
        data = dict(self._read())
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
        self._write(data)

    def exists(self, key: str) -> bool:
        return key in self._read()

    def clear(self, key: str) -> None:
        self.set(key, None)

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._key_locks.get(key)
        if lock is None:
            lock = self._key_locks[key] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def guard(self, key: str) -> AsyncIterator[None]:
        """Wait out any active override of ``key`` and hold it off for the block."""
        async with self._lock_for(key):
            yield

    @asynccontextmanager
    async def override(self, key: str, value: Any) -> AsyncIterator[Any]:
        """
        Hold ``value`` under ``key`` for the body of the block, then clear the key.
        Concurrent overrides of the same key are serialized.
        """
        async with self._lock_for(key):
            self.set(key, value)
            try:
                yield value
            finally:
                self.clear(key)


class FileCredentialStore(InMemoryCredentialStore):
    """JSON file on disk with the same contract as the in-memory store."""

    def __init__(self, path: Optional[Path | str] = None):
        super().__init__()
        self.path = Path(path) if path is not None else DEFAULT_STORE_PATH

    def _read(self) -> Dict[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except ValueError:
            log.warning("Ignoring unreadable credential store at %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file so readers never see a partial document
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        try:
            os.chmod(self.path, 0o600)
        except OSError:  # pragma: no cover - platform dependent
            pass


__all__ = [
    "CredentialStore",
    "InMemoryCredentialStore",
    "FileCredentialStore",
    "EXCHANGE_TOKEN_KEY",
    "SHOP_KEY",
    "DEFAULT_STORE_PATH",
]
