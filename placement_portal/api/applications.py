"""Portal applications and self-reported (external) applications."""
from __future__ import annotations

from typing import Any

from placement_portal.api.base import ApiResponse, ResourceGroup


class ApplicationsAPI(ResourceGroup):
    def list(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/applications", params=params)

    def get(self, application_id: str) -> ApiResponse:
        return self.client.get(f"/applications/{application_id}")

    def apply(
        self,
        job_id: str,
        cover_letter: str = "",
        custom_responses: list[dict[str, Any]] | None = None,
        type: str = "regular",
    ) -> ApiResponse:
        return self.client.post(
            "/applications",
            json={
                "jobId": job_id,
                "coverLetter": cover_letter,
                "customResponses": custom_responses or [],
                "type": type,
            },
        )

    def update_status(self, application_id: str, status: str, feedback: str = "") -> ApiResponse:
        return self.client.put(
            f"/applications/{application_id}/status",
            json={"status": status, "feedback": feedback},
        )

    def withdraw(self, application_id: str) -> ApiResponse:
        return self.client.put(f"/applications/{application_id}/withdraw")


class SelfApplicationsAPI(ResourceGroup):
    def list(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/self-applications", params=params)

    def get(self, application_id: str) -> ApiResponse:
        return self.client.get(f"/self-applications/{application_id}")

    def create(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.post("/self-applications", json=data)

    def update(self, application_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/self-applications/{application_id}", json=data)

    def delete(self, application_id: str) -> ApiResponse:
        return self.client.delete(f"/self-applications/{application_id}")

    def update_status(self, application_id: str, status_update: dict[str, Any]) -> ApiResponse:
        return self.client.patch(f"/self-applications/{application_id}/status", json=status_update)

    def verify(self, application_id: str, is_verified: bool, notes: str = "") -> ApiResponse:
        return self.client.patch(
            f"/self-applications/{application_id}/verify",
            json={"isVerified": is_verified, "verificationNotes": notes},
        )

    def campus_stats(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/self-applications/stats/campus", params=params)
