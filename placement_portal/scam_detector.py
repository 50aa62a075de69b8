"""
Scam detector helpers: local pre-screen, request payloads, and normalization
of whatever the analysis endpoint returns into a complete ``ScamAnalysis``.
"""
from __future__ import annotations

import re
from dataclasses import asdict
from typing import Any

from placement_portal.models import ResourceLink, ScamAnalysis, SubScores, VERDICTS

SAFE_THRESHOLD = 72
WARNING_THRESHOLD = 40
PRESCREEN_MIN_CHARS = 30

PRESCREEN_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"buy.*?(laptop|macbook|equipment|device)", re.I), "Buy equipment upfront"),
    (re.compile(r"reimburse|reimbursement", re.I), "Promises reimbursement"),
    (re.compile(r"send.*?(check|cheque|zelle|cashapp|venmo|crypto|bitcoin|usdt)", re.I),
     "Unusual payment method"),
    (re.compile(r"no interview|without interview|skip.*?interview", re.I), "No interview required"),
    (re.compile(r"verification.*?(deposit|fee|payment)|upfront.*?(fee|payment|deposit)", re.I),
     "Verification/upfront fee required"),
    (re.compile(r"whatsapp|telegram", re.I), "Recruiter on WhatsApp/Telegram"),
    (re.compile(r"ssn|social security|bank.*?detail|account.*?number|aadhaar", re.I),
     "Sensitive info requested early"),
    (re.compile(r"wire transfer|western union|moneygram", re.I), "Wire transfer requested"),
]

DEFAULT_RESOURCES: list[ResourceLink] = [
    ResourceLink("Cyber Crime Portal", "Report to Indian authorities",
                 "https://www.cybercrime.gov.in/", "Shield"),
    ResourceLink("National Helpline 1930", "Call for cyber fraud help", "tel:1930", "Phone"),
    ResourceLink("AmbitionBox Reviews", "Check Indian company reviews",
                 "https://www.ambitionbox.com/", "BarChart3"),
    ResourceLink("Naukri Fraud Alert", "Official job portal warnings",
                 "https://www.naukri.com/fraud-alert", "Target"),
]

IMAGE_INSTRUCTION = (
    "Analyze this uploaded screenshot for job scam signals. "
    "Extract all visible text and detect fraud patterns."
)

DEFAULT_SUMMARY = "Scam analysis completed using available detection signals."
DEFAULT_FINAL_VERDICT = "Proceed only after independent verification."
UNKNOWN_COMPANY = "Unknown Company"


def prescreen(text: str, min_length: int = 0) -> list[str]:
    """Advisory labels for the red-flag patterns found in *text*, in pattern order."""
    if len(text.strip()) < min_length:
        return []
    return [label for pattern, label in PRESCREEN_PATTERNS if pattern.search(text)]


def derive_verdict(trust_score: float) -> str:
    if trust_score >= SAFE_THRESHOLD:
        return "SAFE"
    if trust_score >= WARNING_THRESHOLD:
        return "WARNING"
    return "DANGER"


def _number(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _sub_score(sub: dict[str, Any], key: str, fallback: float) -> float:
    value = sub.get(key)
    if value is None:
        return fallback
    return _number(value, fallback)


def _resource_links(raw: Any) -> list[ResourceLink]:
    links = [
        ResourceLink(
            title=item.get("title", ""),
            desc=item.get("desc", ""),
            url=item.get("url", ""),
            icon=item.get("icon", ""),
        )
        for item in _as_list(raw)
        if isinstance(item, dict)
    ]
    return links or list(DEFAULT_RESOURCES)


def normalize_result(raw: dict[str, Any] | None) -> ScamAnalysis:
    """Fill every field the result view needs, clamping and deriving where the backend was silent."""
    raw = raw or {}
    score = max(0.0, min(100.0, _number(raw.get("trustScore"))))
    verdict = str(raw.get("verdict") or "").upper()
    if verdict not in VERDICTS:
        verdict = derive_verdict(score)

    sub = raw.get("subScores") if isinstance(raw.get("subScores"), dict) else {}
    summary = raw.get("summary") or DEFAULT_SUMMARY

    return ScamAnalysis(
        company=raw.get("company") or UNKNOWN_COMPANY,
        role=raw.get("role") or "Unknown Role",
        trust_score=score,
        verdict=verdict,
        summary=summary,
        sub_scores=SubScores(
            company_legitimacy=_sub_score(sub, "companyLegitimacy", score),
            offer_realism=_sub_score(sub, "offerRealism", max(0.0, score - 5)),
            process_flags=_sub_score(sub, "processFlags", max(0.0, score - 10)),
            community_sentiment=_sub_score(sub, "communitySentiment", score),
        ),
        red_flags=_as_list(raw.get("redFlags")),
        green_flags=_as_list(raw.get("greenFlags")),
        community_findings=_as_list(raw.get("communityFindings")),
        salary_check=raw.get("salaryCheck") or None,
        domain_analysis=raw.get("domainAnalysis") or {},
        email_checks=_as_list(raw.get("emailChecks")),
        resource_links=_resource_links(raw.get("resourceLinks")),
        sources=_as_list(raw.get("sources")),
        final_verdict=raw.get("finalVerdict") or raw.get("summary") or DEFAULT_FINAL_VERDICT,
        action_items=_as_list(raw.get("actionItems")),
        analysis_mode=raw.get("analysisMode") or "ai",
        analysis_warning=raw.get("analysisWarning") or "",
    )


def build_payload(
    mode: str,
    *,
    text: str = "",
    image_base64: str = "",
    image_mime_type: str = "image/jpeg",
    email_header: str = "",
    sender_email: str = "",
    company_url: str = "",
) -> dict[str, Any]:
    """Request body for ``/utils/analyze-scam``; raises ``ValueError`` on empty input."""
    if mode == "text":
        if not text.strip():
            raise ValueError("Please paste your offer details first.")
        return {"input": text.strip(), "sourceType": "text"}

    if mode == "image":
        if not image_base64:
            raise ValueError("Please upload a screenshot first.")
        return {
            "input": IMAGE_INSTRUCTION,
            "imageBase64": image_base64,
            "imageMimeType": image_mime_type,
            "sourceType": "image",
        }

    if mode == "email":
        if not email_header.strip() and not sender_email.strip():
            raise ValueError("Please enter email details first.")
        return {
            "input": (
                f"Email body/header:\n{email_header or 'Not provided'}\n"
                f"Sender email: {sender_email or 'Not provided'}\n"
                f"Company URL: {company_url or 'Not provided'}"
            ),
            "emailHeader": email_header.strip(),
            "senderEmail": sender_email.strip(),
            "companyUrl": company_url.strip(),
            "sourceType": "email",
        }

    raise ValueError(f"Unknown input mode: {mode}")


def _camel_sub_scores(sub: SubScores) -> dict[str, float]:
    return {
        "companyLegitimacy": sub.company_legitimacy,
        "offerRealism": sub.offer_realism,
        "processFlags": sub.process_flags,
        "communitySentiment": sub.community_sentiment,
    }


def build_report(
    result: ScamAnalysis,
    mode: str,
    *,
    text: str = "",
    email_header: str = "",
    sender_email: str = "",
    company_url: str = "",
) -> dict[str, Any]:
    """Body for saving an analysis to the public repository."""
    if mode == "text":
        original = text
    elif mode == "email":
        original = f"{email_header} {sender_email} {company_url}"
    else:
        original = "Screenshot analysis"

    return {
        "companyName": result.company,
        "roleName": result.role,
        "trustScore": result.trust_score,
        "verdict": result.verdict,
        "summary": result.summary,
        "analysisData": {
            "subScores": _camel_sub_scores(result.sub_scores),
            "redFlags": result.red_flags,
            "greenFlags": result.green_flags,
            "communityFindings": result.community_findings,
            "salaryCheck": result.salary_check,
            "domainAnalysis": result.domain_analysis,
            "emailChecks": result.email_checks,
            "finalVerdict": result.final_verdict,
            "actionItems": result.action_items,
            "resourceLinks": [asdict(link) for link in result.resource_links],
        },
        "inputData": {
            "originalText": original,
            "emailHeader": email_header,
            "senderEmail": sender_email,
            "companyUrl": company_url,
            "sourceType": mode,
        },
        "isPublic": True,
    }
