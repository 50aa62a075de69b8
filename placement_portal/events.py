"""Publish/subscribe channel for session changes.

Every tab of one browser subscribes to that browser's channel, so a login or
logout in one tab reaches its sibling tabs without a network call. Other
browsers have their own channels and never hear it.
"""
from __future__ import annotations

import threading
from typing import Any, Callable

from placement_portal.log import get_logger

log = get_logger(__name__)

AUTH_LOGIN = "auth:login"
AUTH_LOGOUT = "auth:logout"

Handler = Callable[[Any], None]


class SessionChannel:
    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        """Register *handler* for *topic*; returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.setdefault(topic, []).append(handler)

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._subscribers.get(topic, [])
                if handler in handlers:
                    handlers.remove(handler)

        return unsubscribe

    def publish(self, topic: str, payload: Any = None, *, sender: Any = None) -> int:
        """Deliver *payload* to every subscriber of *topic*; returns how many were called.

        Handlers registered with ``sender`` as their ``__self__`` are skipped so a
        session does not react to its own broadcast.
        """
        with self._lock:
            handlers = list(self._subscribers.get(topic, []))
        delivered = 0
        for handler in handlers:
            if sender is not None and getattr(handler, "__self__", None) is sender:
                continue
            try:
                handler(payload)
                delivered += 1
            except Exception as exc:
                log.error("Subscriber %r failed on %s: %s", handler, topic, exc)
        log.debug("Published %s to %d subscriber(s)", topic, delivered)
        return delivered

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscribers.get(topic, []))

    def total_subscribers(self) -> int:
        with self._lock:
            return sum(len(handlers) for handlers in self._subscribers.values())


_channels: dict[str, SessionChannel] = {}
_channels_lock = threading.Lock()


def get_channel(scope: str) -> SessionChannel:
    """The channel shared by the tabs of one browser, keyed by its browser id."""
    if not scope:
        raise ValueError("A channel needs a browser scope")
    with _channels_lock:
        channel = _channels.get(scope)
        if channel is None:
            channel = _channels[scope] = SessionChannel()
        return channel


def release_channel(scope: str) -> None:
    """Forget *scope*'s channel once no tab subscribes to it."""
    with _channels_lock:
        channel = _channels.get(scope)
        if channel is not None and channel.total_subscribers() == 0:
            del _channels[scope]
            log.debug("Released channel for browser %s", scope[:8])
