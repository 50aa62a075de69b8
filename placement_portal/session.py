"""
Session/identity provider.

Holds the signed-in user for one UI session, restores it on start-up
(cookie first, stored bearer token second) and keeps the tabs of one browser
in step through that browser's channel.
"""
from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable

from placement_portal.api import ApiError, PortalAPI
from placement_portal.events import AUTH_LOGIN, AUTH_LOGOUT, SessionChannel
from placement_portal.log import get_logger
from placement_portal.models import (
    ROLE_CAMPUS_POC,
    ROLE_COORDINATOR,
    ROLE_MANAGER,
    ROLE_STUDENT,
    SessionUser,
)
from placement_portal.storage import TOKEN_KEY, USER_KEY, LocalStorage

log = get_logger(__name__)

PUBLIC_ROUTES: tuple[str, ...] = ("/auth", "/login", "/register", "/portfolios")


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    CHECKING_COOKIE = "checking_cookie"
    CHECKING_TOKEN = "checking_token"
    AUTHENTICATED = "authenticated"


def is_public_route(path: str) -> bool:
    return any(path.startswith(route) for route in PUBLIC_ROUTES)


def _user_payload(data: Any) -> dict[str, Any] | None:
    """`/auth/me` answers either the user itself or ``{"user": {...}}``."""
    if not isinstance(data, dict) or not data:
        return None
    inner = data.get("user")
    if isinstance(inner, dict):
        return inner
    return data


class SessionProvider:
    def __init__(
        self,
        api: PortalAPI,
        storage: LocalStorage,
        *,
        channel: SessionChannel | None = None,
    ) -> None:
        self.api = api
        self.storage = storage
        self.channel = channel or api.client.channel
        self.user: SessionUser | None = None
        self.loading = True
        self.state = AuthState.UNAUTHENTICATED
        self._lock = threading.Lock()
        self._unsubscribers: list[Callable[[], None]] = [
            self.channel.subscribe(AUTH_LOGIN, self._on_login),
            self.channel.subscribe(AUTH_LOGOUT, self._on_logout),
        ]

    # ------------------------------------------------------------------
    # Role helpers

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> str:
        return self.user.role if self.user else ""

    @property
    def is_student(self) -> bool:
        return self.role == ROLE_STUDENT

    @property
    def is_campus_poc(self) -> bool:
        return self.role == ROLE_CAMPUS_POC

    @property
    def is_coordinator(self) -> bool:
        return self.role == ROLE_COORDINATOR

    @property
    def is_manager(self) -> bool:
        return self.role == ROLE_MANAGER

    # ------------------------------------------------------------------
    # Rehydration

    def rehydrate(self, route: str = "/") -> SessionUser | None:
        """Restore the session from the cookie jar, then from the stored token.

        Never raises; ``loading`` is False when this returns.
        """
        try:
            if is_public_route(route):
                log.debug("Public route %s, skipping session check", route)
                self.state = AuthState.UNAUTHENTICATED
                return None

            self.state = AuthState.CHECKING_COOKIE
            user = self._fetch_me(use_token=False)
            if user is not None:
                return self._authenticate(user)

            if not self.storage.get(TOKEN_KEY):
                self.state = AuthState.UNAUTHENTICATED
                return None

            self.state = AuthState.CHECKING_TOKEN
            user = self._fetch_me(use_token=True)
            if user is not None:
                return self._authenticate(user)

            log.info("Stored token rejected, clearing local credentials")
            self.storage.clear_credentials()
            self.user = None
            self.state = AuthState.UNAUTHENTICATED
            return None
        finally:
            self.loading = False

    def _fetch_me(self, *, use_token: bool) -> SessionUser | None:
        try:
            r = self.api.auth.me(use_token=use_token)
        except ApiError as exc:
            log.warning("Session check (%s) failed: %s", "token" if use_token else "cookie", exc)
            return None
        payload = _user_payload(r.data)
        return SessionUser.from_dict(payload) if payload else None

    def _authenticate(self, user: SessionUser) -> SessionUser:
        with self._lock:
            self.user = user
            self.storage.set(USER_KEY, user.to_dict())
            self.state = AuthState.AUTHENTICATED
        log.info("Session restored for %s (%s)", user.email, user.role)
        return user

    # ------------------------------------------------------------------
    # Explicit actions

    def login(self, email: str, password: str) -> SessionUser:
        """Raises ``ApiError`` on bad credentials; the caller shows the message."""
        r = self.api.auth.login(email, password)
        data = r.data or {}
        token = data.get("token")
        user = SessionUser.from_dict(data.get("user") or {})
        if token:
            self.storage.set(TOKEN_KEY, token)
        self._authenticate(user)
        self.channel.publish(AUTH_LOGIN, user.to_dict(), sender=self)
        log.info("Logged in as %s", user.email)
        return user

    def register(self, user_data: dict[str, Any]) -> SessionUser | None:
        r = self.api.auth.register(user_data)
        data = r.data or {}
        if data.get("token"):
            self.storage.set(TOKEN_KEY, data["token"])
        if data.get("user"):
            user = self._authenticate(SessionUser.from_dict(data["user"]))
            self.channel.publish(AUTH_LOGIN, user.to_dict(), sender=self)
            return user
        return None

    def complete_oauth(self, code: str) -> SessionUser | None:
        """Trade an OAuth callback code for a cookie session, then load the user."""
        self.api.auth.exchange(code)
        user = self._fetch_me(use_token=False)
        if user is None:
            return None
        self._authenticate(user)
        self.channel.publish(AUTH_LOGIN, user.to_dict(), sender=self)
        return user

    def logout(self) -> None:
        try:
            self.api.auth.logout()
        except ApiError as exc:
            log.warning("Logout request failed, clearing client state anyway: %s", exc)
        self._clear()
        self.channel.publish(AUTH_LOGOUT, sender=self)
        log.info("Logged out")

    def update_user(self, updates: dict[str, Any]) -> None:
        with self._lock:
            if self.user is None:
                return
            self.user = self.user.merged(updates)

    def change_password(self, current_password: str, new_password: str) -> None:
        self.api.auth.change_password(current_password, new_password)

    # ------------------------------------------------------------------
    # Channel

    def _on_login(self, payload: Any) -> None:
        if isinstance(payload, dict) and payload:
            with self._lock:
                self.user = SessionUser.from_dict(payload)
                self.state = AuthState.AUTHENTICATED

    def _on_logout(self, _payload: Any = None) -> None:
        self._clear()

    def _clear(self) -> None:
        with self._lock:
            self.user = None
            self.state = AuthState.UNAUTHENTICATED
            self.storage.clear_credentials()

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
