"""Auth endpoints: local login, registration, session lookup, logout."""
from __future__ import annotations

from typing import Any

from placement_portal.api.base import ApiResponse, ResourceGroup


class AuthAPI(ResourceGroup):
    def login(self, email: str, password: str) -> ApiResponse:
        return self.client.post("/auth/login", json={"email": email, "password": password})

    def register(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.post("/auth/register", json=data)

    def me(self, *, use_token: bool = True) -> ApiResponse:
        """``GET /auth/me``; with ``use_token=False`` only the cookie jar authenticates."""
        return self.client.get("/auth/me", use_token=use_token)

    def change_password(self, current_password: str, new_password: str) -> ApiResponse:
        return self.client.put(
            "/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    def exchange(self, code: str) -> ApiResponse:
        """Trade a short-lived OAuth code for a session cookie."""
        return self.client.post("/auth/google/exchange", json={"code": code})

    def logout(self) -> ApiResponse:
        return self.client.post("/auth/logout", json={})
