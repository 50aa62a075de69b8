"""Campus PoC queues: pending skills and pending profiles."""
from __future__ import annotations

from placement_portal.screens.base import Screen, person_name, search_match


class SkillApprovals(Screen):
    """Students with at least one skill awaiting approval."""

    name = "skill_approvals"
    title = "pending skills"

    def default_filters(self):
        return {"search": ""}

    def fetchers(self):
        return {"items": lambda: self.api.users.pending_skills().data or []}

    def matches(self, student):
        return search_match(self.filters.get("search", ""), person_name(student), student.get("email"))

    def pending_count(self) -> int:
        return sum(len(s.get("pendingSkills") or []) for s in self.items)

    def review(self, student_id: str, skill_id: str, status: str) -> bool:
        label = "approved" if status == "approved" else "rejected"
        return self.mutate(self.api.users.approve_skill, student_id, skill_id, status,
                           success=f"Skill {label} successfully")

    def approve_all(self, student_id: str) -> bool:
        """Approve every pending skill of one student, then refetch once."""
        student = next((s for s in self.items if s.get("_id") == student_id), None)
        if student is None:
            return False

        def approve_each() -> None:
            for item in student.get("pendingSkills") or []:
                skill = item.get("skill") or {}
                if skill.get("_id"):
                    self.api.users.approve_skill(student_id, skill["_id"], "approved")

        return self.mutate(approve_each, success="All skills approved")


class ProfileApprovals(Screen):
    name = "profile_approvals"
    title = "pending profiles"

    def default_filters(self):
        return {"search": ""}

    def fetchers(self):
        return {"items": lambda: (self.api.users.pending_profiles().data or {}).get("data") or []}

    def matches(self, student):
        return search_match(self.filters.get("search", ""), person_name(student), student.get("email"))

    def approve(self, student_id: str) -> bool:
        return self.mutate(self.api.users.approve_profile, student_id, "approved",
                           success="Profile approved")

    def request_changes(self, student_id: str, comments: str) -> bool:
        if not comments.strip():
            self.alert = "Please describe the changes needed"
            return False
        return self.mutate(self.api.users.request_profile_changes, student_id, comments.strip(),
                           success="Revision requested")
