"""Scam detector, the community report repository and a single report's page."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from placement_portal.api import ApiError
from placement_portal.log import get_logger
from placement_portal.models import ScamAnalysis, VERDICTS, VOTE_TYPES
from placement_portal.scam_detector import (
    UNKNOWN_COMPANY,
    build_payload,
    build_report,
    normalize_result,
)
from placement_portal.screens.base import PagedScreen, Screen, parse_time

log = get_logger(__name__)

SORT_OPTIONS = ("recent", "trustScore", "helpful")


def _cast_vote(api, report_id: str, vote_type: str) -> None:
    if vote_type not in VOTE_TYPES:
        raise ValueError(f"Unknown vote type: {vote_type}")
    api.scam_reports.vote(report_id, vote_type)


class ScamReportsRepository(PagedScreen):
    name = "scam_reports"
    title = "scam reports"
    page_size = 12
    fetch_keys = ("page", "sortBy")

    def __init__(self, api):
        self.popular_tags: list[Any] = []
        self.top_members: list[Any] = []
        super().__init__(api)

    def default_filters(self):
        return {"page": 1, "sortBy": "recent", "verdict": "all", "search": ""}

    def query_params(self):
        verdict = self.filters.get("verdict") or "all"
        return {
            "verdict": "" if verdict == "all" else verdict.upper(),
            "company": (self.filters.get("search") or "").strip(),
        }

    def fetchers(self):
        params = self.page_params(sortBy=self.filters.get("sortBy"))
        return {"page": lambda: self.api.scam_reports.public(params).data or {}}

    def store(self, results):
        data = results.get("page") or {}
        self.items = list(data.get("reports") or [])
        self.pagination = data.get("pagination") or {}
        self.popular_tags = data.get("popularTags") or []
        self.top_members = data.get("topMembers") or []

    def matches(self, report):
        verdict = (self.filters.get("verdict") or "all").upper()
        if verdict != "ALL" and report.get("verdict") != verdict:
            return False
        search = (self.filters.get("search") or "").strip().lower()
        return not search or search in str(report.get("companyName") or "").lower()

    def quick_stats(self, now: datetime | None = None) -> dict[str, int]:
        now = now or datetime.now(timezone.utc)
        day_ago = now - timedelta(days=1)
        return {
            "totalReports": int(self.pagination.get("totalReports") or len(self.items)),
            "dangerousCompanies": sum(1 for r in self.items if r.get("verdict") == "DANGER"),
            "recentAlerts": sum(
                1 for r in self.items if (parse_time(r.get("createdAt")) or day_ago) > day_ago
            ),
            "helpfulVotes": sum(int((r.get("communityVotes") or {}).get("helpful") or 0) for r in self.items),
        }

    def vote(self, report_id: str, vote_type: str) -> bool:
        return self.mutate(_cast_vote, self.api, report_id, vote_type,
                           success="Vote recorded! Thanks for helping the community.")


class ScamReportDetail(Screen):
    title = "report"

    def __init__(self, api, report_id: str):
        self.report_id = report_id
        self.report: dict[str, Any] | None = None
        super().__init__(api)

    def fetchers(self):
        return {"report": lambda: self.api.scam_reports.get(self.report_id).data}

    def store(self, results):
        self.report = results.get("report") or None

    def reset(self):
        self.report = None

    @property
    def comments(self) -> list[dict[str, Any]]:
        return list((self.report or {}).get("comments") or [])

    def threads(self) -> list[tuple[dict[str, Any], list[dict[str, Any]]]]:
        """Top-level comments, each with its replies."""
        replies: dict[str, list[dict[str, Any]]] = {}
        roots = []
        for c in self.comments:
            parent = c.get("parentId")
            if parent:
                replies.setdefault(str(parent), []).append(c)
            else:
                roots.append(c)
        return [(c, replies.get(str(c.get("_id")), [])) for c in roots]

    def vote(self, vote_type: str) -> bool:
        return self.mutate(_cast_vote, self.api, self.report_id, vote_type,
                           success=f"Thanks for voting {vote_type}!")

    def add_comment(self, text: str, parent_id: str | None = None) -> bool:
        if not text.strip():
            return False
        return self.mutate(self.api.scam_reports.add_comment, self.report_id, text.strip(), parent_id,
                           success="Comment added successfully!")

    def delete_comment(self, comment_id: str) -> bool:
        return self.mutate(self.api.scam_reports.delete_comment, self.report_id, comment_id,
                           success="Comment deleted")

    def like_comment(self, comment_id: str) -> bool:
        return self.mutate(self.api.scam_reports.like_comment, self.report_id, comment_id)

    def delete(self) -> bool:
        try:
            self.api.scam_reports.delete(self.report_id)
        except ApiError as exc:
            self.alert = exc.message or "Failed to delete report"
            return False
        self.report = None
        return True


class ScamDetector:
    """Analysis form state: input, result, company history and personal AI keys."""

    def __init__(self, api):
        self.api = api
        self.result: ScamAnalysis | None = None
        self.company_stats: dict[str, Any] | None = None
        self.report_saved = False
        self.ai_keys: list[dict[str, Any]] = []
        self.alert: str | None = None
        self.notice: str | None = None
        self._inputs: dict[str, Any] = {"mode": "text"}

    def load_keys(self) -> None:
        try:
            data = self.api.users.ai_keys().data
        except ApiError as exc:
            log.warning("Could not load AI keys: %s", exc)
            self.ai_keys = []
            return
        if isinstance(data, dict):
            data = data.get("keys") or data.get("aiKeys") or []
        self.ai_keys = list(data or [])

    def analyze(self, mode: str, **inputs: Any) -> ScamAnalysis | None:
        self.alert = None
        try:
            payload = build_payload(mode, **inputs)
        except ValueError as exc:
            self.alert = str(exc)
            return None
        try:
            r = self.api.utils.analyze_scam(payload)
        except ApiError as exc:
            self.alert = exc.message or "Analysis failed"
            return None

        self.result = normalize_result(r.data if isinstance(r.data, dict) else {})
        self.report_saved = False
        self._inputs = {"mode": mode, **inputs}
        self.fetch_company_stats()
        log.info("Scam analysis: %s → %s (%.0f)", self.result.company,
                 self.result.verdict, self.result.trust_score)
        return self.result

    def fetch_company_stats(self) -> None:
        if self.result is None or self.result.company == UNKNOWN_COMPANY:
            self.company_stats = None
            return
        try:
            self.company_stats = self.api.scam_reports.company(self.result.company, {"limit": 5}).data
        except ApiError as exc:
            log.info("No company stats for %s: %s", self.result.company, exc)
            self.company_stats = None

    def save_report(self) -> bool:
        if self.result is None:
            return False
        inputs = dict(self._inputs)
        mode = inputs.pop("mode", "text")
        body = build_report(
            self.result,
            mode,
            text=inputs.get("text", ""),
            email_header=inputs.get("email_header", ""),
            sender_email=inputs.get("sender_email", ""),
            company_url=inputs.get("company_url", ""),
        )
        try:
            self.api.scam_reports.save(body)
        except ApiError as exc:
            self.alert = f"Failed to save report: {exc.message}"
            return False
        self.report_saved = True
        self.notice = "Report saved to community repository! Thank you for helping fellow students."
        self.fetch_company_stats()
        return True

    # Personal AI keys

    def add_key(self, key: str, label: str = "") -> bool:
        if not key.strip():
            self.alert = "Please enter an API key"
            return False
        return self._key_call(self.api.users.add_ai_key, {"key": key.strip(), "label": label.strip()})

    def toggle_key(self, key_id: str, is_active: bool) -> bool:
        return self._key_call(self.api.users.update_ai_key, key_id, {"isActive": not is_active})

    def delete_key(self, key_id: str) -> bool:
        return self._key_call(self.api.users.delete_ai_key, key_id)

    def test_key(self) -> dict[str, Any] | None:
        try:
            return self.api.utils.test_ai_key().data
        except ApiError as exc:
            self.alert = exc.message or "Key test failed"
            return None

    def _key_call(self, fn, *args) -> bool:
        try:
            fn(*args)
        except ApiError as exc:
            self.alert = exc.message or "Request failed"
            return False
        self.load_keys()
        return True


def verdict_options() -> list[str]:
    return ["all"] + [v.lower() for v in VERDICTS]
