"""Job-readiness screens: student self-tracking, PoC review, criteria configuration."""
from __future__ import annotations

from typing import Any

from placement_portal.api import ApiError
from placement_portal.log import get_logger
from placement_portal.models import COMMON_SCHOOL, Criterion
from placement_portal.readiness import (
    MergedCriteria,
    Progress,
    active_schools,
    ensure_editable,
    group_by_category,
    merge_criteria,
    progress,
    student_criteria,
    validate_criterion,
)
from placement_portal.screens.base import Screen, person_name, search_match

log = get_logger(__name__)

PROFILE_INCOMPLETE = "profile_incomplete"


class JobReadiness(Screen):
    """The signed-in student's criteria joined with their status records."""

    title = "job readiness status"

    def __init__(self, api):
        self.readiness: dict[str, Any] = {}
        super().__init__(api)

    def fetchers(self):
        return {"status": lambda: self.api.job_readiness.my_status().data or {}}

    def store(self, results):
        data = results.get("status") or {}
        self.readiness = data.get("readiness") or {}
        self.items = student_criteria(data)

    def refresh(self) -> bool:
        ok = super().refresh()
        if not ok and self.error and ("school not set" in self.error or "profile or school" in self.error):
            self.error = PROFILE_INCOMPLETE
        return ok

    def reset(self):
        super().reset()
        self.readiness = {}

    @property
    def progress(self) -> Progress:
        return progress(self.items)

    @property
    def is_job_ready(self) -> bool:
        return bool(self.readiness.get("isJobReady"))

    def grouped(self) -> list[tuple[str, list[dict[str, Any]]]]:
        criteria = [Criterion.from_dict(c, source="", editable=False) for c in self.items]
        return [(cat, [c.raw for c in items]) for cat, items in group_by_category(criteria)]

    def submit(self, criteria_id: str, value: str, notes: str = "", proof_file=None) -> bool:
        if not str(value).strip():
            self.alert = "Please provide a response"
            return False
        data = {"selfReportedValue": value, "notes": notes, "status": "completed", "completed": True}
        return self.mutate(self.api.job_readiness.update_my_criterion, criteria_id, data, proof_file,
                           success="Criterion submitted")


def record_stats(record: dict[str, Any]) -> dict[str, int]:
    criteria = record.get("criteriaStatus") or []
    return {
        "total": len(criteria),
        "verified": sum(1 for c in criteria if c.get("status") == "verified"),
        "pending": sum(1 for c in criteria if c.get("status") == "completed"),
        "inProgress": sum(1 for c in criteria if c.get("status") == "in_progress"),
    }


def can_approve(record: dict[str, Any]) -> bool:
    stats = record_stats(record)
    return stats["total"] > 0 and stats["verified"] == stats["total"] and not record.get("isJobReady")


def _student_id(record: dict[str, Any]) -> str:
    student = record.get("student")
    if isinstance(student, dict):
        return str(student.get("_id") or "")
    return str(student or "")


class ReadinessReview(Screen):
    """Campus PoC review of student readiness records."""

    name = "readiness_review"
    title = "students"

    def default_filters(self):
        return {"view": "pending", "search": ""}

    def query_params(self):
        view = self.filters.get("view")
        if view == "pending":
            return {"status": "pending"}
        if view == "job-ready":
            return {"isJobReady": True}
        return {}

    def fetchers(self):
        return {"items": lambda: (self.api.job_readiness.campus_students(self.params()).data or {}).get("records") or []}

    def matches(self, record):
        view = self.filters.get("view")
        if self.filter_mode == "client":
            if view == "pending" and record_stats(record)["pending"] == 0:
                return False
            if view == "job-ready" and not record.get("isJobReady"):
                return False
        student = record.get("student") if isinstance(record.get("student"), dict) else {}
        return search_match(self.filters.get("search", ""), person_name(student), student.get("email"))

    @property
    def visible(self):
        # Search always runs locally, server mode included.
        return [r for r in self.items if self.matches(r)]

    def overall(self) -> dict[str, int]:
        return {
            "total": len(self.items),
            "jobReady": sum(1 for r in self.items if r.get("isJobReady")),
            "pendingReview": sum(1 for r in self.items if record_stats(r)["pending"] > 0),
        }

    def verify(self, student_id: str, criteria_id: str, status: str, notes: str = "") -> bool:
        return self.mutate(self.api.job_readiness.verify_criterion, student_id, criteria_id, status, notes,
                           success="Criterion updated")

    def comment(self, student_id: str, criteria_id: str, comment: str) -> bool:
        if not comment.strip():
            self.alert = "Comment cannot be empty"
            return False
        return self.mutate(self.api.job_readiness.add_poc_comment, student_id, criteria_id, comment.strip(),
                           success="Comment added")

    def rate(self, student_id: str, criteria_id: str, rating: int, scale: int = 4) -> bool:
        if not 1 <= rating <= scale:
            self.alert = f"Rating must be between 1 and {scale}"
            return False
        return self.mutate(self.api.job_readiness.add_poc_rating, student_id, criteria_id, rating,
                           success="Rating saved")

    def approve(self, record: dict[str, Any], notes: str = "") -> bool:
        if not can_approve(record):
            self.alert = "All criteria must be verified before approval"
            return False
        return self.mutate(self.api.job_readiness.approve_job_ready, _student_id(record), {"notes": notes},
                           success="Student marked job ready")


class CriteriaConfig(Screen):
    """Criteria for one school, merged with what other schools share into it."""

    name = "criteria_config"
    title = "criteria"

    def __init__(self, api, school: str = COMMON_SCHOOL):
        self.school = school
        self.schools: list[str] = []
        self.merged = MergedCriteria(school, None)
        super().__init__(api)

    def default_filters(self):
        return {"search": ""}

    def load_schools(self) -> list[str]:
        try:
            settings = (self.api.settings.all().data or {}).get("data") or {}
            self.schools = active_schools(settings)
        except ApiError as exc:
            log.warning("Could not load schools, using defaults: %s", exc)
            self.schools = active_schools(None)
        if self.school not in self.schools:
            self.school = COMMON_SCHOOL
        return self.schools

    def select_school(self, school: str) -> None:
        if school != self.school:
            self.school = school
            self.modal.close()
            self.refresh()

    def fetchers(self):
        return {"configs": lambda: self.api.job_readiness.config().data or []}

    def store(self, results):
        configs = results.get("configs") or []
        if isinstance(configs, dict):
            configs = configs.get("data") or configs.get("configs") or []
        self.merged = merge_criteria(configs, self.school)
        self.items = [c.raw for c in self.merged.criteria]

    def reset(self):
        super().reset()
        self.merged = MergedCriteria(self.school, None)

    @property
    def criteria(self) -> list[Criterion]:
        q = self.filters.get("search", "")
        return [c for c in self.merged.criteria if search_match(q, c.name, c.criteria_id, c.description)]

    def grouped(self):
        return group_by_category(self.criteria)

    def open_editor(self, criterion: Criterion | None = None) -> bool:
        """Show the add/edit form; refuses criteria shared from elsewhere."""
        if criterion is not None:
            try:
                ensure_editable(criterion, self.school)
            except ValueError as exc:
                self.alert = str(exc)
                return False
        self.alert = None
        self.modal.show(criterion)
        return True

    def _config_id(self) -> str:
        if self.merged.config_id:
            return self.merged.config_id
        created = self.api.job_readiness.create_config({"school": self.school, "criteria": []}).data or {}
        self.merged.config_id = created.get("_id")
        log.info("Created readiness config for %s", self.school)
        return self.merged.config_id

    def save(self, criterion: Criterion, editing_id: str | None = None) -> bool:
        try:
            validate_criterion(criterion, adding=editing_id is None)
            if editing_id:
                current = self.merged.find(editing_id)
                if current is None:
                    raise ValueError(f"Criterion {editing_id} is not part of {self.school}")
                ensure_editable(current, self.school)
        except ValueError as exc:
            self.alert = str(exc)
            return False

        def write() -> None:
            config_id = self._config_id()
            if editing_id:
                self.api.job_readiness.edit_criterion(config_id, editing_id, criterion.to_payload())
            else:
                self.api.job_readiness.add_criterion(config_id, criterion.to_payload())

        return self.mutate(write, success="Criterion updated successfully" if editing_id
                           else "New criterion added successfully")

    def delete(self, criterion: Criterion) -> bool:
        try:
            ensure_editable(criterion, self.school)
        except ValueError:
            self.alert = "Switch to the original school view to delete this."
            return False
        if not self.merged.config_id:
            return False
        return self.mutate(self.api.job_readiness.delete_criterion, self.merged.config_id,
                           criterion.criteria_id, success="Criterion deleted")
