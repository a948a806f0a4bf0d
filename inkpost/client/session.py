"""
Inkpost Client — Session State
===============================

What:  The signed-in user and their access token, persisted through a
       pluggable storage port.
Who:   Owned by the application; shared by ApiClient (reads the token) and
       AuthStore (writes it).

Storage port:
    SessionStorage.load()  -> dict | None
    SessionStorage.save(data: dict)
    SessionStorage.clear()

    MemoryStorage     process lifetime only (tests, scripts)
    JsonFileStorage   survives restarts; one JSON document on disk
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class SessionStorage(Protocol):
    def load(self) -> Optional[Dict[str, Any]]: ...

    def save(self, data: Dict[str, Any]) -> None: ...

    def clear(self) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data = dict(initial) if initial else None

    def load(self) -> Optional[Dict[str, Any]]:
        return dict(self._data) if self._data is not None else None

    def save(self, data: Dict[str, Any]) -> None:
        self._data = dict(data)

    def clear(self) -> None:
        self._data = None


class JsonFileStorage:
    """Persists the session as JSON at `path`; parent directories are created."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None
        return data if isinstance(data, dict) else None

    def save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class Session:
    """
    Token + user for one signed-in client.

    Every mutation is written through to storage; load() restores the last
    saved state without contacting the server (AuthStore.initialize() does
    the verification).
    """

    def __init__(self, storage: Optional[SessionStorage] = None):
        self.storage: SessionStorage = storage if storage is not None else MemoryStorage()
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.get("id") if self.user else None

    def load(self) -> bool:
        """Rehydrate from storage. Returns True when a token was found."""
        data = self.storage.load() or {}
        self.token = data.get("token")
        self.user = data.get("user")
        return self.token is not None

    def set(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = user
        self._persist()

    def update_user(self, user: Dict[str, Any]) -> None:
        self.user = user
        self._persist()

    def clear(self) -> None:
        self.token = None
        self.user = None
        self.storage.clear()

    def _persist(self) -> None:
        self.storage.save({"token": self.token, "user": self.user})
