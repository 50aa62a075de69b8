"""Job board for students, one posting with apply and Q&A, and the coordinator's job list."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from placement_portal.api import ApiError
from placement_portal.log import get_logger
from placement_portal.models import JOB_TYPES, PIPELINE_STAGES
from placement_portal.screens.base import PagedScreen, Screen, listify, parse_time, search_match

log = get_logger(__name__)

CATEGORY_JOB_TYPES: dict[str, tuple[str, ...]] = {
    "jobs": ("full_time", "part_time", "contract"),
    "internships": ("internship",),
    "paid-projects": ("paid_project",),
}
MIN_INTEREST_REASON = 50

# Why the apply button is replaced, keyed by ``JobDetail.apply_state()``.
APPLY_BLOCKED = {
    "applied": "You have already applied to this job",
    "closed": "Applications are closed for this job",
    "profile_required": "Your profile must be approved by your Campus PoC before you can apply",
    "interest_pending": "Your interest request is pending approval",
    "interest_rejected": "Your interest request was not approved",
    "interest_needed": "Your match is too low to apply directly. Show interest instead.",
}


def format_salary(salary: dict[str, Any] | None, job_type: str = "") -> str:
    """LPA range for jobs, monthly stipend for internships."""
    salary = salary or {}
    low, high = salary.get("min"), salary.get("max")
    if not low and not high:
        return "Not disclosed"
    if job_type == "internship":
        def fmt(n):
            return f"₹{int(n):,}/month"
    else:
        def fmt(n):
            return f"{n / 100000:.1f} LPA"
    if low and high:
        return f"{fmt(low)} - {fmt(high)}"
    if low:
        return f"{fmt(low)}+"
    return f"Up to {fmt(high)}"


def company_name(job: dict[str, Any]) -> str:
    company = job.get("company")
    if isinstance(company, dict):
        return company.get("name") or ""
    return str(company or "")


def profile_status(api) -> str:
    """The signed-in student's profile status; ``draft`` when it cannot be read."""
    try:
        me = api.auth.me().data or {}
    except ApiError as exc:
        log.warning("Could not read profile status: %s", exc)
        return "draft"
    user = me.get("user") if isinstance(me.get("user"), dict) else me
    return (user.get("studentProfile") or {}).get("profileStatus") or "draft"


class Jobs(PagedScreen):
    """Student job board: jobs, internships or paid projects, all or matching."""

    name = "jobs"
    title = "jobs"
    fetch_keys = ("page", "category", "tab")

    def __init__(self, api):
        self.profile_status = "draft"
        self.role_categories: list[str] = []
        super().__init__(api)

    def default_filters(self):
        return {"category": "jobs", "tab": "all", "page": 1, "search": "", "roleCategory": ""}

    def query_params(self):
        return {
            "search": (self.filters.get("search") or "").strip(),
            "roleCategory": self.filters.get("roleCategory") or "",
        }

    @property
    def job_types(self) -> tuple[str, ...]:
        return CATEGORY_JOB_TYPES.get(self.filters.get("category"), CATEGORY_JOB_TYPES["jobs"])

    def fetchers(self):
        fetch = {"profile": lambda: profile_status(self.api)}
        if self.filters.get("tab") == "matching":
            fetch["matching"] = lambda: self.api.jobs.matching().data or []
        else:
            params = self.page_params(jobType=",".join(self.job_types))
            fetch["page"] = lambda: self.api.jobs.list(params).data or {}
        return fetch

    def store(self, results):
        self.profile_status = results.get("profile") or "draft"
        if "matching" in results:
            types = self.job_types
            self.items = [j for j in listify(results["matching"], "jobs") if j.get("jobType") in types]
            self.pagination = {}
            return
        data = results.get("page") or {}
        self.items = list(data.get("jobs") or [])
        self.pagination = data.get("pagination") or {}

    def matches(self, job):
        role = self.filters.get("roleCategory")
        if role and job.get("roleCategory") != role:
            return False
        return search_match(self.filters.get("search", ""), job.get("title"), company_name(job), job.get("location"))

    @property
    def visible(self):
        # The matching endpoint takes no filters, so that tab always filters here.
        if self.filter_mode == "server" and self.filters.get("tab") != "matching":
            return list(self.items)
        return [j for j in self.items if self.matches(j)]

    @property
    def can_apply(self) -> bool:
        return self.profile_status == "approved"

    def load_role_categories(self) -> list[str]:
        try:
            settings = (self.api.settings.all().data or {}).get("data") or {}
            self.role_categories = [str(c) for c in settings.get("roleCategories") or []]
        except ApiError as exc:
            log.warning("Could not load role categories: %s", exc)
            self.role_categories = []
        return self.role_categories


class JobDetail(Screen):
    """One posting as a student sees it, with match details, apply and questions."""

    title = "job details"

    def __init__(self, api, job_id: str):
        self.job_id = job_id
        self.job: dict[str, Any] | None = None
        self.match: dict[str, Any] | None = None
        self.interest_request: dict[str, Any] | None = None
        self.has_applied = False
        self.profile_status = "draft"
        self.questions: list[dict[str, Any]] = []
        super().__init__(api)

    def _job(self) -> dict[str, Any]:
        try:
            return self.api.jobs.with_match(self.job_id).data or {}
        except ApiError as exc:
            log.info("No match details for job %s (%s), loading the plain posting", self.job_id, exc)
            return self.api.jobs.get(self.job_id).data or {}

    def fetchers(self):
        return {
            "job": self._job,
            "applied": lambda: listify(self.api.applications.list({"job": self.job_id}).data, "applications"),
            "profile": lambda: profile_status(self.api),
            "questions": lambda: listify(self.api.jobs.questions(self.job_id).data, "questions"),
        }

    def store(self, results):
        job = results.get("job") or {}
        self.job = job or None
        self.match = job.get("matchDetails")
        self.interest_request = job.get("interestRequest")
        self.has_applied = bool(results.get("applied"))
        self.profile_status = results.get("profile") or "draft"
        self.questions = list(results.get("questions") or [])

    def reset(self):
        self.job = self.match = self.interest_request = None
        self.has_applied = False
        self.questions = []

    @property
    def custom_requirements(self) -> list[dict[str, Any]]:
        return list((self.job or {}).get("customRequirements") or [])

    def deadline_passed(self, now: datetime | None = None) -> bool:
        deadline = parse_time((self.job or {}).get("applicationDeadline"))
        return deadline is not None and deadline < (now or datetime.now(timezone.utc))

    def apply_state(self, now: datetime | None = None) -> str:
        if self.has_applied:
            return "applied"
        if self.deadline_passed(now):
            return "closed"
        if self.profile_status != "approved":
            return "profile_required"
        status = (self.interest_request or {}).get("status")
        if status == "pending":
            return "interest_pending"
        if status == "rejected":
            return "interest_rejected"
        if self.match and not self.match.get("canApply"):
            return "interest_needed"
        return "open"

    def match_breakdown(self) -> dict[str, Any]:
        breakdown = (self.match or {}).get("breakdown") or {}
        skills = breakdown.get("skills") or {}
        eligibility = breakdown.get("eligibility") or {}
        return {
            "overall": (self.match or {}).get("overallPercentage") or 0,
            "skills_matched": skills.get("matched") or 0,
            "skills_required": skills.get("required") or 0,
            "eligibility_passed": eligibility.get("passed") or 0,
            "eligibility_total": eligibility.get("total") or 0,
            "summary": list((self.match or {}).get("summary") or []),
        }

    def apply(self, cover_letter: str = "", confirmations: dict[int, bool] | None = None) -> bool:
        """Apply with one yes/no answer per custom requirement, indexed by position."""
        state = self.apply_state()
        if state != "open":
            self.alert = APPLY_BLOCKED[state]
            return False
        confirmations = confirmations or {}
        requirements = self.custom_requirements
        if any(req.get("isMandatory") and not confirmations.get(i) for i, req in enumerate(requirements)):
            self.alert = "Please confirm all required fields"
            return False
        responses = [
            {
                "requirement": req.get("requirement"),
                "response": bool(confirmations.get(i)),
                "isMandatory": bool(req.get("isMandatory")),
            }
            for i, req in enumerate(requirements)
        ]
        return self.mutate(self.api.applications.apply, self.job_id, cover_letter.strip(), responses,
                           success="Application submitted successfully!")

    def submit_interest(self, reason: str, acknowledged_gaps: str = "", improvement_plan: str = "") -> bool:
        if len(reason.strip()) < MIN_INTEREST_REASON:
            self.alert = f"Please provide a detailed reason (at least {MIN_INTEREST_REASON} characters)"
            return False
        return self.mutate(self.api.jobs.submit_interest, self.job_id, {
            "reason": reason.strip(),
            "acknowledgedGaps": acknowledged_gaps.strip(),
            "improvementPlan": improvement_plan.strip(),
        }, success="Interest request submitted! Your Campus PoC will review it.")

    def ask_question(self, question: str) -> bool:
        if not question.strip():
            self.alert = "Please enter a question"
            return False
        return self.mutate(self.api.jobs.ask_question, self.job_id, question.strip(),
                           success="Question sent. Answers appear here once published.")


class CoordinatorJobs(PagedScreen):
    """Coordinator's postings: filter, create, edit, move through the pipeline, answer questions."""

    name = "coordinator_jobs"
    title = "jobs"
    page_size = 10

    def __init__(self, api):
        self.stages: list[dict[str, Any]] = [
            {"id": s, "label": s.replace("_", " ").title()} for s in PIPELINE_STAGES
        ]
        self.focused: str | None = None
        self.questions: dict[str, list[dict[str, Any]]] = {}
        super().__init__(api)

    def default_filters(self):
        return {"search": "", "status": "", "jobType": "", "page": 1}

    def fetchers(self):
        params = self.page_params()
        return {"page": lambda: self.api.jobs.list(params).data or {}}

    def store(self, results):
        data = results.get("page") or {}
        self.items = list(data.get("jobs") or [])
        self.pagination = data.get("pagination") or {}

    def matches(self, job):
        for key in ("status", "jobType"):
            if self.filters.get(key) and job.get(key) != self.filters[key]:
                return False
        return search_match(self.filters.get("search", ""), job.get("title"), company_name(job))

    def load_stages(self) -> list[dict[str, Any]]:
        try:
            stages = listify(self.api.settings.pipeline_stages().data, "stages")
        except ApiError as exc:
            log.warning("Could not load pipeline stages, using defaults: %s", exc)
            return self.stages
        if stages:
            self.stages = sorted(stages, key=lambda s: s.get("order", 0))
        return self.stages

    @property
    def stage_ids(self) -> list[str]:
        return [s.get("id") for s in self.stages]

    def focus(self, job_id: str | None) -> None:
        """Highlight one job, e.g. the one a notification pointed at."""
        self.focused = job_id or None
        if self.focused:
            self.load_questions(self.focused)

    def load_questions(self, job_id: str) -> list[dict[str, Any]]:
        try:
            self.questions[job_id] = listify(self.api.jobs.questions(job_id).data, "questions")
        except ApiError as exc:
            self.alert = exc.message or "Could not load questions"
            self.questions[job_id] = []
        return self.questions[job_id]

    def unanswered(self, job_id: str) -> int:
        return sum(1 for q in self.questions.get(job_id, []) if not q.get("answer"))

    def save(self, data: dict[str, Any], job_id: str | None = None) -> bool:
        if not (data.get("title") or "").strip():
            self.alert = "Job title is required"
            return False
        if not company_name(data).strip():
            self.alert = "Company name is required"
            return False
        if data.get("jobType") and data["jobType"] not in JOB_TYPES:
            self.alert = f"Unknown job type: {data['jobType']}"
            return False
        if job_id:
            return self.mutate(self.api.jobs.update, job_id, data, success="Job updated")
        return self.mutate(self.api.jobs.create, data, success="Job created")

    def delete(self, job_id: str) -> bool:
        return self.mutate(self.api.jobs.delete, job_id, success="Job deleted successfully")

    def update_status(self, job_id: str, status: str, notes: str = "") -> bool:
        if status not in self.stage_ids:
            self.alert = f"Unknown pipeline stage: {status}"
            return False
        return self.mutate(self.api.jobs.update_status, job_id, status, notes,
                           success=f"Job status updated to {status}")

    def answer_question(self, job_id: str, question_id: str, answer: str, is_public: bool = True) -> bool:
        if not answer.strip():
            self.alert = "Please write an answer"
            return False
        ok = self.mutate(self.api.jobs.answer_question, job_id, question_id, answer.strip(), is_public,
                         success="Answer saved")
        if ok:
            self.load_questions(job_id)
        return ok
