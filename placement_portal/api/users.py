"""Users, student profiles, skill and profile approvals, personal AI keys."""
from __future__ import annotations

from typing import Any, BinaryIO

from placement_portal.api.base import ApiResponse, ResourceGroup


class UsersAPI(ResourceGroup):
    # Students

    def students(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/users/students", params=params)

    def student(self, student_id: str) -> ApiResponse:
        return self.client.get(f"/users/students/{student_id}")

    def update_profile(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.put("/users/profile", json=data)

    def submit_profile(self) -> ApiResponse:
        return self.client.post("/users/profile/submit")

    def upload_avatar(self, filename: str, fileobj: BinaryIO) -> ApiResponse:
        return self.client.put("/users/profile/avatar", files={"avatar": (filename, fileobj)})

    def upload_resume(self, filename: str, fileobj: BinaryIO) -> ApiResponse:
        return self.client.put("/users/profile", files={"resume": (filename, fileobj)})

    def add_skill(self, skill_id: str) -> ApiResponse:
        return self.client.post("/users/profile/skills", json={"skillId": skill_id})

    def update_student_profile(self, student_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/users/students/{student_id}/profile", json=data)

    def update_student_status(self, student_id: str, status: str) -> ApiResponse:
        return self.client.put(f"/users/students/{student_id}/status", json={"status": status})

    # Approvals (campus PoC)

    def pending_skills(self) -> ApiResponse:
        return self.client.get("/users/pending-skills")

    def approve_skill(self, student_id: str, skill_id: str, status: str) -> ApiResponse:
        return self.client.put(
            f"/users/students/{student_id}/skills/{skill_id}", json={"status": status}
        )

    def pending_profiles(self) -> ApiResponse:
        return self.client.get("/users/pending-profiles")

    def approve_profile(
        self, student_id: str, status: str, revision_notes: str = ""
    ) -> ApiResponse:
        return self.client.put(
            f"/users/students/{student_id}/profile/approve",
            json={"status": status, "revisionNotes": revision_notes},
        )

    def request_profile_changes(self, student_id: str, revision_notes: str) -> ApiResponse:
        return self.approve_profile(student_id, "needs_revision", revision_notes)

    # Staff / admin

    def coordinators(self) -> ApiResponse:
        return self.client.get("/users/coordinators")

    def users(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/users", params=params)

    def user(self, user_id: str) -> ApiResponse:
        return self.client.get(f"/users/{user_id}")

    def update_user(self, user_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/users/{user_id}", json=data)

    def managed_campuses(self) -> ApiResponse:
        return self.client.get("/users/managed-campuses")

    def update_managed_campuses(self, campus_ids: list[str]) -> ApiResponse:
        return self.client.put("/users/managed-campuses", json={"campusIds": campus_ids})

    # Personal AI keys (used by the scam detector)

    def ai_keys(self) -> ApiResponse:
        return self.client.get("/users/me/ai-keys")

    def add_ai_key(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.post("/users/me/ai-keys", json=data)

    def update_ai_key(self, key_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.patch(f"/users/me/ai-keys/{key_id}", json=data)

    def delete_ai_key(self, key_id: str) -> ApiResponse:
        return self.client.delete(f"/users/me/ai-keys/{key_id}")
