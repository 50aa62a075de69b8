"""The pages each role can open, and which page a portal link lands on."""
from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import parse_qsl, urlsplit

from placement_portal.models import ROLE_CAMPUS_POC, ROLE_COORDINATOR, ROLE_MANAGER, ROLE_STUDENT

# Navigation order; the first section is each role's landing page.
ROLE_SECTIONS: dict[str, tuple[str, ...]] = {
    ROLE_STUDENT: (
        "jobs", "applications", "self-applications", "job-readiness",
        "scam-detector", "scam-reports", "profile", "notifications",
    ),
    ROLE_CAMPUS_POC: (
        "students", "skill-approvals", "profile-approvals", "self-applications",
        "job-readiness", "criteria", "notifications",
    ),
    ROLE_COORDINATOR: ("jobs", "students", "forum", "skills", "criteria", "notifications"),
    ROLE_MANAGER: ("students", "settings", "criteria", "notifications"),
}


@dataclass(frozen=True)
class Route:
    section: str
    params: dict[str, str] = field(default_factory=dict)


def role_prefix(role: str) -> str:
    return role.replace("_", "-", 1)


def page_path(role: str, section: str) -> str:
    """The ``url_path`` a section's page is registered under."""
    return f"{role_prefix(role)}-{section}"


def resolve(url: str | None, role: str | None) -> Route | None:
    """Map a portal link like ``/student/jobs/42`` or ``/coordinator/jobs?jobId=42`` to a page.

    A trailing path segment becomes ``params["id"]``; query parameters are kept.
    Returns None when the link belongs to another role or names a page this
    role does not have.
    """
    if not url or not role:
        return None
    parts = urlsplit(url)
    segments = [s for s in parts.path.split("/") if s]
    if len(segments) < 2 or segments[0] != role_prefix(role):
        return None
    section = segments[1]
    if section not in ROLE_SECTIONS.get(role, ()):
        return None
    params = dict(parse_qsl(parts.query))
    if len(segments) > 2:
        params["id"] = segments[2]
    return Route(section, params)
