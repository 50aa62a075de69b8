"""Client-side key/value store for the session credential (JSON file with file locking).

Each browser gets its own file under ``data/sessions/``, named by a random
browser id, so one browser's login is never visible to another.
"""
from __future__ import annotations

import fcntl
import json
import re
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any, Iterator

from placement_portal.config import DATA_DIR
from placement_portal.log import get_logger

log = get_logger(__name__)

SESSIONS_DIR: Path = DATA_DIR / "sessions"

TOKEN_KEY = "token"
USER_KEY = "user"

_BROWSER_ID = re.compile(r"^[0-9a-f]{32}$")


@contextmanager
def _locked(f: IO[str], exclusive: bool = True) -> Iterator[IO[str]]:
    """Hold an flock on *f* for the body; platforms without flock run unlocked."""
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
        held = True
    except OSError as exc:
        log.debug("No lock on %s: %s", getattr(f, "name", f), exc)
        held = False
    try:
        yield f
    finally:
        if held:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)


def new_browser_id() -> str:
    return uuid.uuid4().hex


def is_browser_id(value: Any) -> bool:
    return isinstance(value, str) and bool(_BROWSER_ID.match(value))


def browser_storage(browser_id: str) -> "LocalStorage":
    """The credential file belonging to one browser."""
    if not is_browser_id(browser_id):
        raise ValueError(f"Invalid browser id: {browser_id!r}")
    return LocalStorage(SESSIONS_DIR / f"{browser_id}.json")


class LocalStorage:
    """Persistent string store backed by one JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f, _locked(f, exclusive=False):
            try:
                data = json.load(f)
            except json.JSONDecodeError:
                log.warning("Corrupt storage file %s, treating as empty", self.path.name)
                data = {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f, _locked(f):
            json.dump(data, f, indent=2)

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)
        log.debug("Stored %s", key)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
            log.debug("Removed %s", key)

    def clear_credentials(self) -> None:
        data = self._read()
        data.pop(TOKEN_KEY, None)
        data.pop(USER_KEY, None)
        self._write(data)


class MemoryStorage(LocalStorage):
    """Same interface, no disk."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def _read(self) -> dict[str, Any]:
        return dict(self._data)

    def _write(self, data: dict[str, Any]) -> None:
        self._data = dict(data)
