"""Coordinator view of the company Q&A forum."""
from __future__ import annotations

from typing import Any

from placement_portal.scam_detector import UNKNOWN_COMPANY
from placement_portal.screens.base import Screen, search_match


class Forum(Screen):
    name = "forum"
    title = "questions"

    def default_filters(self):
        return {"search": "", "answered": "all"}

    def fetchers(self):
        return {"items": lambda: self.api.questions.list(self.params()).data or []}

    def matches(self, q):
        answered = self.filters.get("answered")
        if answered == "unanswered" and q.get("answer"):
            return False
        if answered == "answered" and not q.get("answer"):
            return False
        return search_match(self.filters.get("search", ""), q.get("companyName"), q.get("question"))

    def grouped(self) -> dict[str, list[dict[str, Any]]]:
        groups: dict[str, list[dict[str, Any]]] = {}
        for q in self.visible:
            groups.setdefault(q.get("companyName") or UNKNOWN_COMPANY, []).append(q)
        return groups

    @property
    def unanswered_count(self) -> int:
        return sum(1 for q in self.items if not q.get("answer"))

    def answer(self, question_id: str, answer: str) -> bool:
        if not answer.strip():
            self.alert = "Answer cannot be empty"
            return False
        return self.mutate(self.api.questions.answer, question_id, answer.strip(),
                           success="Question answered")

    def delete(self, question_id: str) -> bool:
        return self.mutate(self.api.questions.delete, question_id, success="Question deleted")
