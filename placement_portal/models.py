"""Data models for portal resources held by the client."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

ROLE_STUDENT = "student"
ROLE_CAMPUS_POC = "campus_poc"
ROLE_COORDINATOR = "coordinator"
ROLE_MANAGER = "manager"
ROLES: tuple[str, ...] = (ROLE_STUDENT, ROLE_CAMPUS_POC, ROLE_COORDINATOR, ROLE_MANAGER)

APPLICATION_STATUSES: tuple[str, ...] = (
    "applied", "shortlisted", "in_progress", "selected", "rejected", "withdrawn",
)
SELF_APPLICATION_STATUSES: tuple[str, ...] = (
    "applied", "screening", "in_progress", "interview_scheduled",
    "interview_completed", "offer_received", "offer_accepted",
    "offer_declined", "rejected", "withdrawn",
)
PROFILE_STATUSES: tuple[str, ...] = ("draft", "pending_approval", "approved", "needs_revision")
CRITERION_STATUSES: tuple[str, ...] = ("not_started", "in_progress", "completed", "verified")
CRITERION_TYPES: tuple[str, ...] = ("answer", "link", "yes/no", "comment")
CRITERION_CATEGORIES: tuple[str, ...] = (
    "profile", "skills", "technical", "preparation", "academic", "other",
)
VERDICTS: tuple[str, ...] = ("SAFE", "WARNING", "DANGER")
VOTE_TYPES: tuple[str, ...] = ("agree", "disagree", "helpful")
JOB_TYPES: tuple[str, ...] = ("full_time", "part_time", "internship", "contract", "paid_project")
PIPELINE_STAGES: tuple[str, ...] = (
    "draft", "pending_approval", "application_stage", "hr_shortlisting",
    "interviewing", "on_hold", "closed", "filled",
)
STUDENT_STATUSES: tuple[str, ...] = (
    "Active", "Placed", "Dropout", "Internship Paid", "Paid Project", "Internship UnPaid",
)

COMMON_SCHOOL = "Common"


@dataclass
class SessionUser:
    id: str
    email: str
    role: str
    first_name: str = ""
    last_name: str = ""
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionUser":
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            email=data.get("email", ""),
            role=data.get("role", ""),
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            raw=dict(data),
        )

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.email

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)

    def merged(self, updates: dict[str, Any]) -> "SessionUser":
        """Shallow-merge *updates* into the raw payload and rebuild."""
        return SessionUser.from_dict({**self.raw, **updates})


@dataclass
class Criterion:
    criteria_id: str
    name: str
    category: str = "other"
    type: str = "answer"
    description: str = ""
    is_mandatory: bool = True
    target_schools: list[str] = field(default_factory=list)
    poc_comment_required: bool = False
    poc_comment_template: str = ""
    poc_rating_required: bool = False
    poc_rating_scale: int = 4
    source: str = ""
    editable: bool = True
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, source: str, editable: bool) -> "Criterion":
        category = data.get("category") or "other"
        return cls(
            criteria_id=str(data.get("criteriaId", "")),
            name=data.get("name", ""),
            category=category if category in CRITERION_CATEGORIES else "other",
            type=data.get("type") or "answer",
            description=data.get("description") or "",
            is_mandatory=data.get("isMandatory", True) is not False,
            target_schools=list(data.get("targetSchools") or []),
            poc_comment_required=bool(data.get("pocCommentRequired")),
            poc_comment_template=data.get("pocCommentTemplate") or "",
            poc_rating_required=bool(data.get("pocRatingRequired")),
            poc_rating_scale=int(data.get("pocRatingScale") or 4),
            source=source,
            editable=editable,
            raw=dict(data),
        )

    def as_readonly(self) -> "Criterion":
        return replace(self, editable=False)

    def to_payload(self) -> dict[str, Any]:
        """Body for the add/edit criterion endpoints."""
        return {
            "criteriaId": self.criteria_id.strip(),
            "name": self.name.strip(),
            "description": self.description.strip(),
            "type": self.type,
            "pocCommentRequired": self.poc_comment_required,
            "pocCommentTemplate": self.poc_comment_template.strip(),
            "pocRatingRequired": self.poc_rating_required,
            "pocRatingScale": self.poc_rating_scale,
            "category": self.category,
            "isMandatory": self.is_mandatory,
            "targetSchools": list(self.target_schools),
        }


@dataclass
class SubScores:
    company_legitimacy: float
    offer_realism: float
    process_flags: float
    community_sentiment: float


@dataclass
class ResourceLink:
    title: str
    desc: str
    url: str
    icon: str = ""


@dataclass
class ScamAnalysis:
    company: str
    role: str
    trust_score: float
    verdict: str
    summary: str
    sub_scores: SubScores
    red_flags: list[str] = field(default_factory=list)
    green_flags: list[str] = field(default_factory=list)
    community_findings: list[Any] = field(default_factory=list)
    salary_check: dict | None = None
    domain_analysis: dict = field(default_factory=dict)
    email_checks: list[Any] = field(default_factory=list)
    resource_links: list[ResourceLink] = field(default_factory=list)
    sources: list[Any] = field(default_factory=list)
    final_verdict: str = ""
    action_items: list[str] = field(default_factory=list)
    analysis_mode: str = "ai"
    analysis_warning: str = ""
