"""Job postings, per-job questions and interest requests."""
from __future__ import annotations

from typing import Any

from placement_portal.api.base import ApiResponse, ResourceGroup


class JobsAPI(ResourceGroup):
    def list(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/jobs", params=params)

    def matching(self) -> ApiResponse:
        return self.client.get("/jobs/matching")

    def get(self, job_id: str) -> ApiResponse:
        return self.client.get(f"/jobs/{job_id}")

    def with_match(self, job_id: str) -> ApiResponse:
        return self.client.get(f"/jobs/{job_id}/match")

    def companies(self) -> ApiResponse:
        return self.client.get("/jobs/companies")

    def create(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.post("/jobs", json=data)

    def update(self, job_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/jobs/{job_id}", json=data)

    def delete(self, job_id: str) -> ApiResponse:
        return self.client.delete(f"/jobs/{job_id}")

    def update_status(self, job_id: str, status: str, notes: str = "") -> ApiResponse:
        return self.client.patch(f"/jobs/{job_id}/status", json={"status": status, "notes": notes})

    def questions(self, job_id: str) -> ApiResponse:
        return self.client.get(f"/jobs/{job_id}/questions")

    def ask_question(self, job_id: str, question: str) -> ApiResponse:
        return self.client.post(f"/jobs/{job_id}/questions", json={"question": question})

    def answer_question(
        self, job_id: str, question_id: str, answer: str, is_public: bool = True
    ) -> ApiResponse:
        return self.client.patch(
            f"/jobs/{job_id}/questions/{question_id}",
            json={"answer": answer, "isPublic": is_public},
        )

    def submit_interest(self, job_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.post(f"/jobs/{job_id}/interest", json=data)

    def interest_requests(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/jobs/interest-requests/all", params=params)

    def review_interest_request(self, request_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.patch(f"/jobs/interest-requests/{request_id}", json=data)
