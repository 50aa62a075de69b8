"""
Screen controllers: fetch, keep, filter and mutate one resource collection.

Each screen refreshes with every independent fetch running in parallel, and
keeps the results only when no newer refresh has started since. A mutation
is followed by a full refetch; nothing is patched locally.
"""
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from placement_portal.api import ApiError, PortalAPI
from placement_portal.config import filter_mode
from placement_portal.log import get_logger

log = get_logger(__name__)

Fetcher = Callable[[], Any]


@dataclass
class ModalState:
    open: bool = False
    payload: Any = None

    def show(self, payload: Any = None) -> None:
        self.open = True
        self.payload = payload

    def close(self) -> None:
        self.open = False
        self.payload = None


class RequestGuard:
    """Monotonic request tokens; only the latest token may store its results."""

    def __init__(self) -> None:
        self._latest = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest


def fetch_parallel(fetchers: dict[str, Fetcher]) -> dict[str, Any]:
    """Run every fetcher at once; the first failure propagates."""
    if len(fetchers) == 1:
        name, fn = next(iter(fetchers.items()))
        return {name: fn()}
    with ThreadPoolExecutor(max_workers=len(fetchers)) as pool:
        futures = {name: pool.submit(fn) for name, fn in fetchers.items()}
        return {name: future.result() for name, future in futures.items()}


def _contains(haystack: Any, needle: str) -> bool:
    return needle in str(haystack or "").lower()


class Screen:
    """Base controller. Subclasses name their config key and fetchers."""

    name = ""
    title = ""

    def __init__(self, api: PortalAPI) -> None:
        self.api = api
        self.items: list[dict[str, Any]] = []
        self.loading = False
        self.error: str | None = None
        self.alert: str | None = None
        self.notice: str | None = None
        self.modal = ModalState()
        self.filters: dict[str, Any] = dict(self.default_filters())
        self.filter_mode = filter_mode(self.name) if self.name else "client"
        self._guard = RequestGuard()

    # ------------------------------------------------------------------
    # Hooks

    def default_filters(self) -> dict[str, Any]:
        return {}

    def fetchers(self) -> dict[str, Fetcher]:
        raise NotImplementedError

    def store(self, results: dict[str, Any]) -> None:
        self.items = list(results.get("items") or [])

    def reset(self) -> None:
        self.items = []

    def matches(self, item: dict[str, Any]) -> bool:
        """Client-mode filter predicate."""
        return True

    def query_params(self) -> dict[str, Any]:
        """Server-mode query parameters built from the current filters."""
        return {k: v for k, v in self.filters.items() if v not in (None, "", "all")}

    def params(self, **fixed: Any) -> dict[str, Any] | None:
        out = dict(fixed)
        if self.filter_mode == "server":
            out.update(self.query_params())
        return out or None

    # ------------------------------------------------------------------
    # Fetch

    def refresh(self) -> bool:
        token = self._guard.next()
        self.loading = True
        try:
            results = fetch_parallel(self.fetchers())
            if not self._guard.is_current(token):
                log.debug("%s discarded a stale response (token %d)", self.__class__.__name__, token)
                return False
            self.store(results)
        except ApiError as exc:
            return self._fail(token, exc, exc.message)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            # The backend answered, but not with the shape this screen reads.
            return self._fail(token, exc, f"Unexpected response while loading {self.title or 'data'}")
        finally:
            if self._guard.is_current(token):
                self.loading = False
        self.error = None
        return True

    def _fail(self, token: int, exc: Exception, message: str | None) -> bool:
        if self._guard.is_current(token):
            log.warning("%s refresh failed: %s", self.__class__.__name__, exc)
            self.error = message or f"Failed to load {self.title or 'data'}"
            self.reset()
        return False

    @property
    def visible(self) -> list[dict[str, Any]]:
        if self.filter_mode == "server":
            return list(self.items)
        return [item for item in self.items if self.matches(item)]

    def set_filters(self, **updates: Any) -> None:
        changed = any(self.filters.get(k) != v for k, v in updates.items())
        self.filters.update(updates)
        if changed and self.filter_mode == "server":
            self.refresh()

    # ------------------------------------------------------------------
    # Mutate

    def mutate(self, fn: Callable[..., Any], *args: Any, success: str | None = None, **kwargs: Any) -> bool:
        """Run one mutation, then refetch. On failure set ``alert`` and skip the refetch."""
        try:
            fn(*args, **kwargs)
        except ApiError as exc:
            log.warning("%s mutation failed: %s", self.__class__.__name__, exc)
            self.alert = exc.message or "Request failed"
            self.notice = None
            return False
        except ValueError as exc:
            self.alert = str(exc)
            self.notice = None
            return False
        self.alert = None
        self.notice = success
        self.modal.close()
        self.refresh()
        return True


class PagedScreen(Screen):
    """One page of a server-paginated list.

    ``fetch_keys`` name the filters that change what the server returns in
    either filter mode; changing one of them, or any filter in server mode,
    refetches from page 1.
    """

    page_size = 10
    fetch_keys: tuple[str, ...] = ("page",)

    def __init__(self, api: PortalAPI) -> None:
        self.pagination: dict[str, Any] = {}
        super().__init__(api)

    def reset(self) -> None:
        super().reset()
        self.pagination = {}

    def page_params(self, **fixed: Any) -> dict[str, Any] | None:
        return self.params(page=self.filters.get("page", 1), limit=self.page_size, **fixed)

    @property
    def page(self) -> int:
        return int(self.filters.get("page") or 1)

    @property
    def total_pages(self) -> int:
        return max(1, int(self.pagination.get("pages") or self.pagination.get("totalPages") or 1))

    def set_filters(self, **updates: Any) -> None:
        changed = {k: v for k, v in updates.items() if self.filters.get(k) != v}
        if not changed:
            return
        refetch = self.filter_mode == "server" or any(k in self.fetch_keys for k in changed)
        if refetch and "page" not in changed:
            changed["page"] = 1
        self.filters.update(changed)
        if refetch:
            self.refresh()


def search_match(query: str, *fields: Any) -> bool:
    """Case-insensitive substring match across *fields*; an empty query matches."""
    q = (query or "").strip().lower()
    if not q:
        return True
    return any(_contains(f, q) for f in fields)


def count_by(items: list[dict[str, Any]], key: str, values: tuple[str, ...]) -> dict[str, int]:
    counts = {v: 0 for v in values}
    for item in items:
        v = item.get(key)
        if v in counts:
            counts[v] += 1
    return counts


def person_name(person: Any) -> str:
    if not isinstance(person, dict):
        return ""
    return f"{person.get('firstName') or ''} {person.get('lastName') or ''}".strip()


def listify(data: Any, key: str) -> list[dict[str, Any]]:
    """Accept a bare list or a ``{key: [...]}`` / ``{"data": [...]}`` envelope."""
    if isinstance(data, dict):
        data = data.get(key) or data.get("data") or []
    return list(data or [])


def parse_time(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
