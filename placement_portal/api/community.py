"""Skills catalogue, company Q&A forum and notifications."""
from __future__ import annotations

from typing import Any

from placement_portal.api.base import ApiResponse, ResourceGroup


class SkillsAPI(ResourceGroup):
    def list(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/skills", params=params)

    def categories(self) -> ApiResponse:
        return self.client.get("/skills/categories")

    def create(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.post("/skills", json=data)

    def update(self, skill_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/skills/{skill_id}", json=data)

    def delete(self, skill_id: str) -> ApiResponse:
        return self.client.delete(f"/skills/{skill_id}")


class QuestionsAPI(ResourceGroup):
    def list(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/questions", params=params)

    def ask(self, company_name: str, question: str) -> ApiResponse:
        return self.client.post("/questions", json={"companyName": company_name, "question": question})

    def answer(self, question_id: str, answer: str) -> ApiResponse:
        return self.client.patch(f"/questions/{question_id}/answer", json={"answer": answer})

    def delete(self, question_id: str) -> ApiResponse:
        return self.client.delete(f"/questions/{question_id}")


class NotificationsAPI(ResourceGroup):
    def list(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/notifications", params=params)

    def unread_count(self) -> ApiResponse:
        return self.client.get("/notifications/unread-count")

    def mark_read(self, notification_id: str) -> ApiResponse:
        return self.client.put(f"/notifications/{notification_id}/read")

    def mark_all_read(self) -> ApiResponse:
        return self.client.put("/notifications/read-all")

    def delete(self, notification_id: str) -> ApiResponse:
        return self.client.delete(f"/notifications/{notification_id}")

    def clear_read(self) -> ApiResponse:
        return self.client.delete("/notifications/clear/read")
