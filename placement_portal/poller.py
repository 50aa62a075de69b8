"""Background pollers for the unread-notification badges."""
from __future__ import annotations

import threading
from typing import Callable

from placement_portal.config import poll_interval
from placement_portal.log import get_logger

log = get_logger(__name__)


class Poller:
    """Call ``fn`` immediately, then every ``interval`` seconds, until ``stop()``.

    ``alive`` is checked before every tick. Once it returns False the owner is
    gone: the loop ends and ``on_orphaned`` runs once on the poller's thread.
    """

    def __init__(
        self,
        fn: Callable[[], None],
        interval: float,
        name: str = "poller",
        *,
        alive: Callable[[], bool] | None = None,
        on_orphaned: Callable[[], None] | None = None,
    ) -> None:
        self.fn = fn
        self.interval = interval
        self.name = name
        self.alive = alive
        self.on_orphaned = on_orphaned
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "Poller":
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        log.debug("Started %s (every %ss)", self.name, self.interval)
        return self

    def _owner_alive(self) -> bool:
        if self.alive is None:
            return True
        try:
            return bool(self.alive())
        except Exception as exc:
            log.warning("%s liveness check failed, stopping: %s", self.name, exc)
            return False

    def _loop(self) -> None:
        while not self._stop.is_set():
            if not self._owner_alive():
                log.info("%s owner is gone, stopping", self.name)
                self._stop.set()
                if self.on_orphaned is not None:
                    try:
                        self.on_orphaned()
                    except Exception as exc:
                        log.warning("%s cleanup failed: %s", self.name, exc)
                return
            try:
                self.fn()
            except Exception as exc:
                log.warning("%s tick failed: %s", self.name, exc)
            if self._stop.wait(self.interval):
                break

    def stop(self, timeout: float | None = 2.0) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None
        log.debug("Stopped %s", self.name)


class UnreadCounter:
    """Latest unread-notification count, refreshed by a ``Poller``."""

    def __init__(
        self,
        api,
        name: str = "navbar",
        *,
        alive: Callable[[], bool] | None = None,
        on_orphaned: Callable[[], None] | None = None,
    ) -> None:
        self.api = api
        self.count = 0
        self.poller = Poller(self.refresh, poll_interval(name), name=f"{name}-unread",
                             alive=alive, on_orphaned=on_orphaned)

    def refresh(self) -> None:
        r = self.api.notifications.unread_count()
        self.count = int((r.data or {}).get("count", 0))

    @property
    def running(self) -> bool:
        return self.poller.running

    def start(self) -> "UnreadCounter":
        self.poller.start()
        return self

    def stop(self) -> None:
        self.poller.stop()
