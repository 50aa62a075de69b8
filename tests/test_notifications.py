import pytest

from placement_portal.models import ROLES
from placement_portal.notifications import (
    APPLICATION_TYPES,
    JOB_TYPES,
    PROFILE_TYPES,
    SELF_APPLICATION_TYPES,
    SKILL_TYPES,
    badge_text,
    notification_url,
)
from placement_portal.routes import ROLE_SECTIONS, Route, page_path, resolve


def note(kind, entity_id=None, **extra):
    n = {"type": kind, **extra}
    if entity_id:
        n["relatedEntity"] = {"id": entity_id}
    return n


@pytest.mark.parametrize("notification,role,url", [
    (note("new_job_posting", "j1"), "student", "/student/jobs/j1"),
    (note("job_question", "j1"), "coordinator", "/coordinator/jobs?jobId=j1"),
    (note("job_posted"), "coordinator", "/coordinator/jobs"),
    (note("skill_approval_needed"), "campus_poc", "/campus-poc/skill-approvals"),
    (note("skill_approved"), "student", "/student/profile"),
    (note("skill_rejected"), "coordinator", "/coordinator/skills"),
    (note("interview_scheduled", "a1"), "student", "/student/applications?appId=a1"),
    (note("self_application_verified", "s1"), "student", "/student/self-applications?appId=s1"),
    (note("profile_approval_needed"), "campus_poc", "/campus-poc/profile-approvals"),
    (note("profile_needs_revision"), "student", "/student/profile"),
    (note("job_readiness_update"), "campus_poc", "/campus-poc/job-readiness"),
])
def test_deep_links(notification, role, url):
    assert notification_url(notification, role) == url


def test_explicit_link_wins():
    assert notification_url(note("skill_approved", link="/student/skills/42"), "student") == "/student/skills/42"


def test_unroutable():
    assert notification_url(note("system_maintenance"), "student") is None
    assert notification_url(note("skill_approved"), None) is None
    assert notification_url(None, "student") is None


@pytest.mark.parametrize("count,text", [(0, ""), (-1, ""), (1, "1"), (9, "9"), (10, "9+"), (250, "9+")])
def test_badge(count, text):
    assert badge_text(count) == text


# Notification types each role is sent, per the backend's notification triggers.
RECEIVED = {
    "student": [
        "new_job_posting", "job_posted", "question_answered",
        "skill_approved", "skill_rejected",
        "application_update", "interview_scheduled", "feedback_received",
        "self_application_update", "self_application_verified",
        "profile_approved", "profile_needs_revision", "job_readiness_update",
    ],
    "campus_poc": [
        "skill_approval_needed", "profile_approval_needed", "self_application", "job_readiness_update",
    ],
    "coordinator": ["job_question", "job_posted", "new_job_posting", "skill_approval_needed"],
}


@pytest.mark.parametrize("role,kind", [(r, k) for r, kinds in RECEIVED.items() for k in kinds])
def test_every_received_notification_opens_a_registered_page(role, kind):
    route = resolve(notification_url(note(kind, "e1"), role), role)

    assert route is not None
    assert route.section in ROLE_SECTIONS[role]


ALL_TYPES = sorted(JOB_TYPES | SKILL_TYPES | APPLICATION_TYPES | SELF_APPLICATION_TYPES | PROFILE_TYPES
                   | {"job_readiness_update", "system_maintenance"})


@pytest.mark.parametrize("role", ROLES)
@pytest.mark.parametrize("kind", ALL_TYPES)
def test_links_never_point_at_missing_pages(role, kind):
    route = resolve(notification_url(note(kind, "e1"), role), role)

    assert route is None or route.section in ROLE_SECTIONS[role]


def test_resolve_keeps_ids_and_query():
    assert resolve("/student/jobs/j1", "student") == Route("jobs", {"id": "j1"})
    assert resolve("/coordinator/jobs?jobId=j1", "coordinator") == Route("jobs", {"jobId": "j1"})
    assert resolve("/student/applications?appId=a1", "student") == Route("applications", {"appId": "a1"})
    assert resolve("/campus-poc/skill-approvals", "campus_poc") == Route("skill-approvals")


def test_resolve_rejects_foreign_and_unknown_links():
    assert resolve("/student/jobs/j1", "campus_poc") is None
    assert resolve("/student/skills/42", "student") is None
    assert resolve("https://example.com/offer", "student") is None
    assert resolve("", "student") is None


def test_page_paths_are_unique_per_role():
    for role, sections in ROLE_SECTIONS.items():
        paths = [page_path(role, s) for s in sections]
        assert len(set(paths)) == len(paths)
        assert paths[-1] == f"{role.replace('_', '-')}-notifications"
