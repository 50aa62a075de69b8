"""Student directory, one student's portfolio, and the skills catalogue."""
from __future__ import annotations

from typing import Any

from placement_portal.models import STUDENT_STATUSES
from placement_portal.readiness import Progress, progress, student_criteria
from placement_portal.screens.base import PagedScreen, Screen, listify, person_name, search_match

SKILL_REVIEW_STATUSES = ("approved", "rejected")
PORTFOLIO_LINKS = (
    ("github", "GitHub"), ("linkedIn", "LinkedIn"), ("portfolio", "Portfolio"), ("resume", "Resume"),
)


def _profile(student: dict[str, Any]) -> dict[str, Any]:
    return student.get("studentProfile") or {}


class Students(PagedScreen):
    name = "students"
    title = "students"
    page_size = 15

    def default_filters(self):
        return {"search": "", "school": "", "batch": "", "status": "", "page": 1}

    def fetchers(self):
        params = self.page_params()
        return {"page": lambda: self.api.users.students(params).data or {}}

    def store(self, results):
        data = results.get("page") or {}
        self.items = listify(data, "students")
        self.pagination = (data.get("pagination") if isinstance(data, dict) else None) or {}

    def matches(self, student):
        profile = _profile(student)
        for key, field in (("school", "currentSchool"), ("batch", "batch"), ("status", "currentStatus")):
            wanted = self.filters.get(key)
            if wanted and str(profile.get(field) or "") != str(wanted):
                return False
        return search_match(self.filters.get("search", ""), person_name(student), student.get("email"))

    def schools(self) -> list[str]:
        return sorted({_profile(s).get("currentSchool") for s in self.items if _profile(s).get("currentSchool")})

    def update_status(self, student_id: str, status: str) -> bool:
        if status not in STUDENT_STATUSES:
            self.alert = f"Unknown status: {status}"
            return False
        return self.mutate(self.api.users.update_student_status, student_id, status,
                           success=f"Status updated to {status}")


class StudentDetail(Screen):
    """A student's portfolio: profile, skills, applications and readiness."""

    title = "student"

    def __init__(self, api, student_id: str):
        self.student_id = student_id
        self.student: dict[str, Any] | None = None
        self.applications: list[dict[str, Any]] = []
        self.readiness: dict[str, Any] = {}
        self.criteria: list[dict[str, Any]] = []
        super().__init__(api)

    def fetchers(self):
        return {
            "student": lambda: self.api.users.student(self.student_id).data or {},
            "applications": lambda: listify(
                self.api.applications.list({"student": self.student_id}).data, "applications"),
            "readiness": lambda: self.api.job_readiness.student_readiness(self.student_id).data or {},
        }

    def store(self, results):
        self.student = results.get("student") or None
        self.applications = list(results.get("applications") or [])
        data = results.get("readiness") or {}
        self.readiness = data.get("readiness") or {}
        self.criteria = student_criteria(data)

    def reset(self):
        self.student = None
        self.applications, self.readiness, self.criteria = [], {}, []

    @property
    def profile(self) -> dict[str, Any]:
        return _profile(self.student or {})

    @property
    def progress(self) -> Progress:
        return progress(self.criteria)

    def portfolio(self) -> dict[str, Any]:
        profile = self.profile
        return {
            "name": person_name(self.student),
            "email": (self.student or {}).get("email", ""),
            "school": profile.get("currentSchool") or "",
            "module": profile.get("currentModule") or "",
            "batch": profile.get("batch") or "",
            "cgpa": profile.get("cgpa"),
            "status": profile.get("currentStatus") or "",
            "about": profile.get("about") or "",
            "links": [(label, profile[key]) for key, label in PORTFOLIO_LINKS if profile.get(key)],
            "skills": [s for s in self.skills() if s["status"] == "approved"],
        }

    def skills(self, status: str | None = None) -> list[dict[str, Any]]:
        out = []
        for entry in self.profile.get("skills") or []:
            skill = entry.get("skill") or {}
            row = {
                "id": skill.get("_id"),
                "name": skill.get("name") or "",
                "category": skill.get("category") or "",
                "status": entry.get("status") or "pending",
                "rating": entry.get("selfRating"),
            }
            if status is None or row["status"] == status:
                out.append(row)
        return out

    def review_skill(self, skill_id: str, status: str) -> bool:
        if status not in SKILL_REVIEW_STATUSES:
            self.alert = f"Unknown review status: {status}"
            return False
        return self.mutate(self.api.users.approve_skill, self.student_id, skill_id, status,
                           success=f"Skill {status}")

    def update_status(self, status: str) -> bool:
        if status not in STUDENT_STATUSES:
            self.alert = f"Unknown status: {status}"
            return False
        return self.mutate(self.api.users.update_student_status, self.student_id, status,
                           success=f"Status updated to {status}")


class SkillsCatalogue(Screen):
    name = "skills"
    title = "skills"

    def __init__(self, api):
        self.categories: list[str] = []
        super().__init__(api)

    def default_filters(self):
        return {"search": "", "category": ""}

    def fetchers(self):
        return {
            "items": lambda: listify(self.api.skills.list(self.params()).data, "skills"),
            "categories": lambda: listify(self.api.skills.categories().data, "categories"),
        }

    def store(self, results):
        self.items = list(results.get("items") or [])
        self.categories = [str(c) for c in results.get("categories") or []]

    def matches(self, skill):
        category = self.filters.get("category")
        if category and skill.get("category") != category:
            return False
        return search_match(self.filters.get("search", ""), skill.get("name"), skill.get("description"))

    def save(self, data: dict[str, Any], skill_id: str | None = None) -> bool:
        if not (data.get("name") or "").strip():
            self.alert = "Skill name is required"
            return False
        if skill_id:
            return self.mutate(self.api.skills.update, skill_id, data, success="Skill updated")
        return self.mutate(self.api.skills.create, data, success="Skill created")

    def delete(self, skill_id: str) -> bool:
        return self.mutate(self.api.skills.delete, skill_id, success="Skill deleted")
