"""Student application tracking and the campus review of self-reported applications."""
from __future__ import annotations

from typing import Any

from placement_portal.models import APPLICATION_STATUSES, SELF_APPLICATION_STATUSES
from placement_portal.screens.base import Screen, count_by, person_name, search_match

ACTIVE_STATUSES = ("applied", "in_progress", "interview_scheduled")
OFFER_STATUSES = ("offer_received", "offer_accepted")


class MyApplications(Screen):
    name = "my_applications"
    title = "applications"

    def default_filters(self):
        return {"status": "all"}

    def fetchers(self):
        return {"items": lambda: (self.api.applications.list(self.params()).data or {}).get("applications") or []}

    def matches(self, item):
        status = self.filters.get("status")
        return status in (None, "all") or item.get("status") == status

    def status_counts(self) -> dict[str, int]:
        return count_by(self.items, "status", APPLICATION_STATUSES)

    def withdraw(self, application_id: str) -> bool:
        return self.mutate(self.api.applications.withdraw, application_id,
                           success="Application withdrawn")


class SelfApplications(Screen):
    name = "self_applications"
    title = "applications"

    def default_filters(self):
        return {"status": "all"}

    def fetchers(self):
        return {"items": lambda: (self.api.self_applications.list(self.params()).data or {}).get("selfApplications") or []}

    def matches(self, item):
        status = self.filters.get("status")
        return status in (None, "all") or item.get("status") == status

    def stats(self) -> dict[str, int]:
        return {
            "total": len(self.items),
            "active": sum(1 for a in self.items if a.get("status") in ACTIVE_STATUSES),
            "offers": sum(1 for a in self.items if a.get("status") in OFFER_STATUSES),
            "rejected": sum(1 for a in self.items if a.get("status") == "rejected"),
        }

    def save(self, data: dict[str, Any], application_id: str | None = None) -> bool:
        if not (data.get("companyName") or "").strip() or not (data.get("jobTitle") or "").strip():
            self.alert = "Company and job title are required"
            return False
        if application_id:
            return self.mutate(self.api.self_applications.update, application_id, data,
                               success="Application updated")
        return self.mutate(self.api.self_applications.create, data, success="Application added")

    def delete(self, application_id: str) -> bool:
        return self.mutate(self.api.self_applications.delete, application_id,
                           success="Application deleted")

    def update_status(self, application_id: str, status: str, notes: str = "") -> bool:
        if status not in SELF_APPLICATION_STATUSES:
            self.alert = f"Unknown status: {status}"
            return False
        return self.mutate(self.api.self_applications.update_status, application_id,
                           {"status": status, "notes": notes}, success="Status updated")


def verification_state(app: dict[str, Any]) -> str:
    if app.get("isVerified") is True:
        return "verified"
    if app.get("isVerified") is False and app.get("verifiedBy"):
        return "rejected"
    return "pending"


class SelfApplicationsReview(Screen):
    name = "self_applications_review"
    title = "applications"

    def __init__(self, api):
        self.stats: dict[str, Any] = {}
        super().__init__(api)

    def default_filters(self):
        return {"status": "all", "verified": "pending", "search": ""}

    def fetchers(self):
        return {
            "items": lambda: (self.api.self_applications.list({"all": True}).data or {}).get("selfApplications") or [],
            "stats": lambda: self.api.self_applications.campus_stats().data or {},
        }

    def store(self, results):
        super().store(results)
        self.stats = results.get("stats") or {}

    def reset(self):
        super().reset()
        self.stats = {}

    def matches(self, app):
        status = self.filters.get("status")
        if status not in (None, "all") and app.get("status") != status:
            return False
        verified = self.filters.get("verified")
        if verified not in (None, "all") and verification_state(app) != verified:
            return False
        return search_match(
            self.filters.get("search", ""),
            person_name(app.get("student")),
            (app.get("company") or {}).get("name") if isinstance(app.get("company"), dict) else app.get("companyName"),
            app.get("jobTitle"),
        )

    def grouped_by_student(self) -> dict[str, dict[str, Any]]:
        groups: dict[str, dict[str, Any]] = {}
        for app in self.visible:
            student = app.get("student") or {}
            sid = str(student.get("_id") or "unknown")
            group = groups.setdefault(sid, {"student": student, "applications": []})
            group["applications"].append(app)
        return groups

    def verify(self, application_id: str, verified: bool, notes: str = "") -> bool:
        return self.mutate(
            self.api.self_applications.verify, application_id, verified, notes,
            success="Application verified" if verified else "Application rejected",
        )
