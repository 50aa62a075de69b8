"""Job-readiness: criteria configuration, student self-tracking, PoC review."""
from __future__ import annotations

from typing import Any, BinaryIO

from placement_portal.api.base import ApiResponse, ResourceGroup


class JobReadinessAPI(ResourceGroup):
    # Config (campus PoC / coordinator / manager)

    def config(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/job-readiness/config", params=params)

    def create_config(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.post("/job-readiness/config", json=data)

    def add_criterion(self, config_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.post(f"/job-readiness/config/{config_id}/criteria", json=data)

    def edit_criterion(self, config_id: str, criteria_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(
            f"/job-readiness/config/{config_id}/criteria/{criteria_id}", json=data
        )

    def delete_criterion(self, config_id: str, criteria_id: str) -> ApiResponse:
        return self.client.delete(f"/job-readiness/config/{config_id}/criteria/{criteria_id}")

    # Student

    def my_status(self) -> ApiResponse:
        return self.client.get("/job-readiness/my-status")

    def update_my_criterion(
        self,
        criteria_id: str,
        data: dict[str, Any],
        proof_file: tuple[str, BinaryIO] | None = None,
    ) -> ApiResponse:
        """JSON update, or multipart form when a proof file is attached."""
        path = f"/job-readiness/my-status/{criteria_id}"
        if proof_file is None:
            return self.client.patch(path, json=data)
        form = {k: str(v) for k, v in data.items() if v is not None and v != ""}
        return self.client.patch(path, data=form, files={"proofFile": proof_file})

    # Campus PoC review

    def campus_students(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/job-readiness/campus-students", params=params)

    def student_readiness(self, student_id: str) -> ApiResponse:
        return self.client.get(f"/job-readiness/student/{student_id}")

    def verify_criterion(
        self, student_id: str, criteria_id: str, status: str, notes: str = ""
    ) -> ApiResponse:
        return self.client.patch(
            f"/job-readiness/student/{student_id}/verify/{criteria_id}",
            json={"status": status, "verificationNotes": notes},
        )

    def add_poc_comment(self, student_id: str, criteria_id: str, comment: str) -> ApiResponse:
        return self.client.post(
            f"/job-readiness/student/{student_id}/comment/{criteria_id}", json={"comment": comment}
        )

    def add_poc_rating(self, student_id: str, criteria_id: str, rating: int) -> ApiResponse:
        return self.client.post(
            f"/job-readiness/student/{student_id}/rate/{criteria_id}", json={"rating": rating}
        )

    def approve_job_ready(self, student_id: str, data: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.patch(f"/job-readiness/student/{student_id}/approve", json=data or {})
