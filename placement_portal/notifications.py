"""Deep links and badge text for notifications."""
from __future__ import annotations

from typing import Any

from placement_portal.models import ROLE_CAMPUS_POC, ROLE_COORDINATOR, ROLE_STUDENT

JOB_TYPES = {"new_job_posting", "job_posted", "job_question", "question_answered"}
SKILL_TYPES = {"skill_approval_needed", "skill_approved", "skill_rejected"}
APPLICATION_TYPES = {"application_update", "interview_scheduled", "feedback_received"}
SELF_APPLICATION_TYPES = {
    "self_application", "self_application_update", "self_application_verified",
}
PROFILE_TYPES = {"profile_approval_needed", "profile_approved", "profile_needs_revision"}


def _query(name: str, entity_id: Any) -> str:
    return f"?{name}={entity_id}" if entity_id else ""


def notification_url(notification: dict[str, Any] | None, role: str | None) -> str | None:
    """Where clicking *notification* should take a user with *role*; None when unroutable."""
    if not notification or not role:
        return None
    if notification.get("link"):
        return notification["link"]

    prefix = "/" + role.replace("_", "-", 1)
    entity_id = (notification.get("relatedEntity") or {}).get("id")
    kind = notification.get("type")

    if kind in JOB_TYPES:
        if role == ROLE_COORDINATOR:
            return f"{prefix}/jobs{_query('jobId', entity_id)}"
        return f"{prefix}/jobs/{entity_id or ''}"

    if kind in SKILL_TYPES:
        if role == ROLE_CAMPUS_POC:
            return f"{prefix}/skill-approvals"
        if role == ROLE_STUDENT:
            return f"{prefix}/profile"
        return f"{prefix}/skills"

    if kind in APPLICATION_TYPES:
        return f"{prefix}/applications{_query('appId', entity_id)}"

    if kind in SELF_APPLICATION_TYPES:
        return f"{prefix}/self-applications{_query('appId', entity_id)}"

    if kind in PROFILE_TYPES:
        if role == ROLE_CAMPUS_POC:
            return f"{prefix}/profile-approvals"
        return f"{prefix}/profile"

    if kind == "job_readiness_update":
        return f"{prefix}/job-readiness"

    return None


def badge_text(count: int) -> str:
    if count <= 0:
        return ""
    return "9+" if count > 9 else str(count)
