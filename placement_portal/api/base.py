"""HTTP plumbing shared by every resource group: one request, one response, no retry."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests

from placement_portal.config import api_base_url
from placement_portal.events import AUTH_LOGOUT, SessionChannel
from placement_portal.log import get_logger
from placement_portal.storage import TOKEN_KEY, LocalStorage

log = get_logger(__name__)

DEFAULT_TIMEOUT = 15


class ApiError(Exception):
    """Non-2xx response or transport failure; carries the backend's error payload."""

    def __init__(
        self,
        status: int,
        message: str,
        errors: list[dict[str, Any]] | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.errors = errors or []
        self.payload = payload

    @property
    def field_errors(self) -> dict[str, str]:
        """Validation errors keyed by field name (express-validator `param`/`path`)."""
        out: dict[str, str] = {}
        for e in self.errors:
            name = e.get("path") or e.get("param") or e.get("field")
            if name:
                out[name] = e.get("msg") or e.get("message", "")
        return out

    def __str__(self) -> str:
        return f"{self.message} (HTTP {self.status})" if self.status else self.message


@dataclass
class ApiResponse:
    status: int
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)


def _error_from_response(r: requests.Response) -> ApiError:
    try:
        payload = r.json()
    except ValueError:
        payload = r.text
    message = ""
    errors: list[dict[str, Any]] = []
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error") or ""
        raw_errors = payload.get("errors")
        if isinstance(raw_errors, list):
            errors = [e for e in raw_errors if isinstance(e, dict)]
    return ApiError(r.status_code, message or r.reason or "Request failed", errors, payload)


class ApiClient:
    """Thin wrapper around a ``requests.Session`` pointed at the portal backend.

    The session's cookie jar carries the HttpOnly auth cookie; the bearer token
    stored in local storage is sent as a fallback on every call that allows it.
    """

    def __init__(
        self,
        storage: LocalStorage,
        *,
        base_url: str | None = None,
        channel: SessionChannel | None = None,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.storage = storage
        self.base_url = (base_url or api_base_url()).rstrip("/")
        self.channel = channel or SessionChannel()
        self.http = session or requests.Session()
        self.timeout = timeout

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        use_token: bool = True,
    ) -> ApiResponse:
        headers: dict[str, str] = {"Accept": "application/json"}
        token = self.storage.get(TOKEN_KEY) if use_token else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}

        url = f"{self.base_url}{path}"
        log.debug("API request: %s %s auth=%s", method, path, bool(token))
        try:
            r = self.http.request(
                method,
                url,
                params=params or None,
                json=json,
                data=data,
                files=files,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.warning("API %s %s transport error: %s", method, path, exc)
            raise ApiError(0, f"Network error: {exc}") from exc

        if r.status_code >= 400:
            err = _error_from_response(r)
            log.warning("API %s %s → %d %s", method, path, r.status_code, err.message)
            if r.status_code == 401 and not path.startswith("/auth"):
                self._expire_session()
            raise err

        return ApiResponse(status=r.status_code, data=_body(r), headers=dict(r.headers))

    def _expire_session(self) -> None:
        self.storage.clear_credentials()
        self.channel.publish(AUTH_LOGOUT)

    def get(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("DELETE", path, **kwargs)


def _body(r: requests.Response) -> Any:
    if not r.content:
        return None
    ctype = r.headers.get("Content-Type", "")
    if "json" in ctype:
        return r.json()
    return r.content


class ResourceGroup:
    """One backend resource (auth, jobs, ...); each method is a single HTTP call."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client
