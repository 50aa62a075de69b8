"""
Job-readiness derivations: the per-school criteria merge, the edit guard,
category grouping and a student's progress summary.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from placement_portal.models import COMMON_SCHOOL, CRITERION_CATEGORIES, Criterion

DEFAULT_SCHOOLS: list[str] = [
    COMMON_SCHOOL,
    "School of Programming",
    "School of Business",
    "School of Finance",
    "School of Education",
    "School of Second Chance",
]

CATEGORY_LABELS: dict[str, str] = {
    "profile": "Profile Build",
    "skills": "Key Skills",
    "technical": "Technical Rounds",
    "preparation": "Interview Prep",
    "academic": "Academic Details",
    "other": "Other",
}


class CriterionLocked(ValueError):
    """Raised when a criterion shared from another school is edited here."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"This is shared from {source}. Switch to {source} to edit it.")


@dataclass
class MergedCriteria:
    school: str
    config_id: str | None
    criteria: list[Criterion] = field(default_factory=list)

    def find(self, criteria_id: str) -> Criterion | None:
        for c in self.criteria:
            if c.criteria_id == criteria_id:
                return c
        return None


def _config_for(configs: list[dict[str, Any]], school: str) -> dict[str, Any] | None:
    for conf in configs:
        if conf.get("school") == school:
            return conf
    return None


def merge_criteria(configs: list[dict[str, Any]], school: str) -> MergedCriteria:
    """Build the criteria list shown for *school*.

    Own criteria come first and are editable. Criteria shared by other
    schools and the Common track follow, read-only, each id at most once.
    """
    common = _config_for(configs, COMMON_SCHOOL)
    seen: set[str] = set()
    merged: list[Criterion] = []

    def add(raw: dict[str, Any], source: str) -> None:
        cid = str(raw.get("criteriaId", ""))
        if cid in seen:
            return
        seen.add(cid)
        merged.append(Criterion.from_dict(raw, source=source, editable=source == school))

    if school == COMMON_SCHOOL:
        for raw in (common or {}).get("criteria") or []:
            add(raw, COMMON_SCHOOL)
        for conf in configs:
            source = conf.get("school", "")
            if source == COMMON_SCHOOL:
                continue
            for raw in conf.get("criteria") or []:
                if raw.get("targetSchools"):
                    add(raw, source)
        return MergedCriteria(school, (common or {}).get("_id"), merged)

    own = _config_for(configs, school)
    for raw in (own or {}).get("criteria") or []:
        add(raw, school)
    for conf in configs:
        source = conf.get("school", "")
        if source in (school, COMMON_SCHOOL):
            continue
        for raw in conf.get("criteria") or []:
            if school in (raw.get("targetSchools") or []):
                add(raw, source)
    for raw in (common or {}).get("criteria") or []:
        add(raw, COMMON_SCHOOL)
    return MergedCriteria(school, (own or {}).get("_id"), merged)


def ensure_editable(criterion: Criterion, school: str) -> None:
    if criterion.source != school:
        raise CriterionLocked(criterion.source or "the original school")


def validate_criterion(criterion: Criterion, *, adding: bool) -> None:
    if not criterion.name.strip():
        raise ValueError("Name is required")
    if adding and not criterion.criteria_id.strip():
        raise ValueError("Unique ID is required")


def group_by_category(criteria: list[Criterion]) -> list[tuple[str, list[Criterion]]]:
    """Fixed category order; empty categories dropped except ``other``."""
    groups = []
    for cat in CRITERION_CATEGORIES:
        items = [c for c in criteria if c.category == cat]
        if items or cat == "other":
            groups.append((cat, items))
    return groups


def active_schools(settings: dict[str, Any] | None) -> list[str]:
    """``Common`` plus configured schools that are not marked inactive."""
    if not settings:
        return list(DEFAULT_SCHOOLS)
    inactive = set(settings.get("inactiveSchools") or [])
    return [COMMON_SCHOOL] + [s for s in settings.get("schools") or [] if s not in inactive]


# ---------------------------------------------------------------------------
# Student progress


def _verification_status(status: str) -> str:
    if status == "verified":
        return "verified"
    if status == "completed":
        return "pending"
    return "not_started"


def student_criteria(my_status: dict[str, Any]) -> list[dict[str, Any]]:
    """Join the student's config with their per-criterion status records."""
    readiness = my_status.get("readiness") or {}
    statuses = {s.get("criteriaId"): s for s in readiness.get("criteriaStatus") or []}
    rows = []
    for crit in my_status.get("config") or []:
        st = statuses.get(crit.get("criteriaId")) or {}
        raw_status = st.get("status", "")
        rows.append({
            **crit,
            "selfReportedValue": st.get("selfReportedValue") or "",
            "notes": st.get("notes") or "",
            "proofUrl": st.get("proofUrl") or "",
            "pocComment": st.get("pocComment") or "",
            "pocRating": st.get("pocRating"),
            "verificationNotes": st.get("verificationNotes") or "",
            "completed": raw_status in ("completed", "verified"),
            "verificationStatus": _verification_status(raw_status),
        })
    return rows


@dataclass
class Progress:
    completed: int
    submitted: int
    total: int
    percentage: int


def progress(criteria: list[dict[str, Any]]) -> Progress:
    total = len(criteria)
    verified = sum(1 for c in criteria if c.get("verificationStatus") == "verified")
    submitted = sum(1 for c in criteria if c.get("completed"))
    pct = int(verified / total * 100 + 0.5) if total else 0
    return Progress(verified, submitted, total, pct)
