"""Manager settings and the student's own profile."""
from __future__ import annotations

from typing import Any

from placement_portal.api import ApiError
from placement_portal.readiness import active_schools
from placement_portal.screens.base import Screen, listify

LIST_SETTINGS = ("schools", "rolePreferences", "technicalSkills", "degreeOptions")


class Settings(Screen):
    title = "settings"

    def __init__(self, api):
        self.settings: dict[str, Any] = {}
        self.cycles: list[dict[str, Any]] = []
        self.campuses: list[dict[str, Any]] = []
        super().__init__(api)

    def fetchers(self):
        return {
            "settings": lambda: (self.api.settings.all().data or {}).get("data") or {},
            "cycles": lambda: self.api.placement_cycles.list().data or [],
            "campuses": lambda: self.api.campuses.list().data or [],
        }

    def store(self, results):
        self.settings = results.get("settings") or {}
        self.cycles = listify(results.get("cycles"), "cycles")
        self.campuses = listify(results.get("campuses"), "campuses")

    def reset(self):
        self.settings, self.cycles, self.campuses = {}, [], []

    @property
    def active_schools(self) -> list[str]:
        return active_schools(self.settings)

    def add_item(self, key: str, item: str) -> bool:
        item = item.strip()
        if not item:
            return False
        if item in (self.settings.get(key) or []):
            self.alert = f"{item} already exists"
            return False
        return self.mutate(self.api.settings.add_item, key, item, success=f"Added {item}")

    def remove_item(self, key: str, item: str) -> bool:
        return self.mutate(self.api.settings.remove_item, key, item, success=f"Removed {item}")

    def toggle_school(self, school: str) -> bool:
        inactive = list(self.settings.get("inactiveSchools") or [])
        if school in inactive:
            inactive.remove(school)
        else:
            inactive.append(school)
        return self.mutate(self.api.settings.update, "inactiveSchools", inactive,
                           success="School visibility updated")

    def create_cycle(self, name: str, start_date: str, end_date: str = "") -> bool:
        if not name.strip():
            self.alert = "Cycle name is required"
            return False
        data = {"name": name.strip(), "startDate": start_date, "endDate": end_date or None}
        return self.mutate(self.api.placement_cycles.create, data, success="Placement cycle created")

    def toggle_cycle(self, cycle_id: str, is_active: bool) -> bool:
        return self.mutate(self.api.placement_cycles.update, cycle_id, {"isActive": not is_active})

    def delete_cycle(self, cycle_id: str) -> bool:
        return self.mutate(self.api.placement_cycles.delete, cycle_id, success="Placement cycle deleted")


class Profile(Screen):
    """The signed-in student's profile; saving refetches from ``/auth/me``."""

    title = "profile"

    def __init__(self, api, session=None):
        self.session = session
        self.user: dict[str, Any] = {}
        super().__init__(api)

    def fetchers(self):
        return {"me": lambda: self.api.auth.me().data or {}}

    def store(self, results):
        me = results.get("me") or {}
        self.user = me.get("user") if isinstance(me.get("user"), dict) else me

    def reset(self):
        self.user = {}

    @property
    def student_profile(self) -> dict[str, Any]:
        return self.user.get("studentProfile") or {}

    @property
    def status(self) -> str:
        return self.student_profile.get("profileStatus") or "draft"

    @property
    def revision_notes(self) -> str:
        return self.student_profile.get("revisionNotes") or ""

    def save(self, data: dict[str, Any]) -> bool:
        ok = self.mutate(self.api.users.update_profile, data, success="Profile updated")
        if ok and self.session is not None:
            self.session.update_user(self.user)
        return ok

    def submit(self) -> bool:
        if self.status == "pending_approval":
            self.alert = "Your profile is already awaiting approval"
            return False
        return self.mutate(self.api.users.submit_profile, success="Profile submitted for approval")

    def upload_resume(self, filename: str, fileobj) -> bool:
        return self.mutate(self.api.users.upload_resume, filename, fileobj, success="Resume uploaded")

    def change_password(self, current: str, new: str, confirm: str) -> bool:
        if new != confirm:
            self.alert = "New passwords do not match"
            return False
        if len(new) < 6:
            self.alert = "Password must be at least 6 characters"
            return False
        try:
            self.api.auth.change_password(current, new)
        except ApiError as exc:
            self.alert = exc.message or "Failed to change password"
            return False
        self.alert = None
        self.notice = "Password changed"
        return True
