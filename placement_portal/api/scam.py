"""Community scam-report repository and the analysis utilities endpoints."""
from __future__ import annotations

from typing import Any
from urllib.parse import quote

from placement_portal.api.base import ApiResponse, ResourceGroup


class ScamReportsAPI(ResourceGroup):
    def save(self, report: dict[str, Any]) -> ApiResponse:
        return self.client.post("/scam-reports", json=report)

    def public(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/scam-reports/public", params=params)

    def company(self, company_name: str, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get(f"/scam-reports/company/{quote(company_name, safe='')}", params=params)

    def get(self, report_id: str) -> ApiResponse:
        return self.client.get(f"/scam-reports/{report_id}")

    def vote(self, report_id: str, vote_type: str) -> ApiResponse:
        return self.client.post(f"/scam-reports/{report_id}/vote", json={"voteType": vote_type})

    def delete(self, report_id: str) -> ApiResponse:
        return self.client.delete(f"/scam-reports/{report_id}")

    def add_comment(self, report_id: str, content: str, parent_id: str | None = None) -> ApiResponse:
        body: dict[str, Any] = {"content": content}
        if parent_id:
            body["parentId"] = parent_id
        return self.client.post(f"/scam-reports/{report_id}/comments", json=body)

    def delete_comment(self, report_id: str, comment_id: str) -> ApiResponse:
        return self.client.delete(f"/scam-reports/{report_id}/comments/{comment_id}")

    def like_comment(self, report_id: str, comment_id: str) -> ApiResponse:
        return self.client.post(f"/scam-reports/{report_id}/comments/{comment_id}/like")


class UtilsAPI(ResourceGroup):
    def check_url(self, url: str) -> ApiResponse:
        return self.client.post("/utils/check-url", json={"url": url})

    def test_ai_key(self) -> ApiResponse:
        return self.client.post("/utils/test-ai-key", json={})

    def analyze_scam(self, payload: dict[str, Any]) -> ApiResponse:
        return self.client.post("/utils/analyze-scam", json=payload)
