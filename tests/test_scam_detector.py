import pytest

from placement_portal.scam_detector import (
    DEFAULT_RESOURCES,
    IMAGE_INSTRUCTION,
    PRESCREEN_MIN_CHARS,
    UNKNOWN_COMPANY,
    build_payload,
    build_report,
    derive_verdict,
    normalize_result,
    prescreen,
)


@pytest.mark.parametrize("score,verdict", [
    (100, "SAFE"), (72, "SAFE"), (71.9, "WARNING"), (40, "WARNING"), (39.9, "DANGER"), (0, "DANGER"),
])
def test_verdict_thresholds(score, verdict):
    assert derive_verdict(score) == verdict


def test_normalize_clamps_and_derives():
    result = normalize_result({"trustScore": 140, "verdict": "maybe"})

    assert result.trust_score == 100
    assert result.verdict == "SAFE"
    assert result.company == UNKNOWN_COMPANY
    assert result.resource_links == DEFAULT_RESOURCES

    assert normalize_result({"trustScore": -3}).trust_score == 0
    assert normalize_result({"trustScore": "n/a"}).verdict == "DANGER"


def test_backend_verdict_wins_case_insensitively():
    result = normalize_result({"trustScore": 90, "verdict": "danger"})

    assert result.verdict == "DANGER"


def test_missing_sub_scores_follow_the_trust_score():
    sub = normalize_result({"trustScore": 50, "subScores": {"processFlags": 0}}).sub_scores

    assert sub.company_legitimacy == 50
    assert sub.offer_realism == 45
    assert sub.process_flags == 0
    assert sub.community_sentiment == 50

    low = normalize_result({"trustScore": 3}).sub_scores
    assert (low.offer_realism, low.process_flags) == (0, 0)


def test_final_verdict_falls_back_to_summary():
    result = normalize_result({"trustScore": 20, "summary": "Classic equipment scam."})

    assert result.final_verdict == "Classic equipment scam."


def test_backend_resources_replace_defaults():
    result = normalize_result({"resourceLinks": [{"title": "CERT-In", "desc": "", "url": "https://cert-in.org.in"}]})

    assert [link.title for link in result.resource_links] == ["CERT-In"]


def test_prescreen_reports_flags_in_pattern_order():
    text = "Please wire transfer the deposit and ping the recruiter on Telegram. No interview needed."

    assert prescreen(text) == [
        "No interview required",
        "Recruiter on WhatsApp/Telegram",
        "Wire transfer requested",
    ]


def test_prescreen_ignores_short_input_when_asked():
    assert prescreen("whatsapp me", PRESCREEN_MIN_CHARS) == []
    assert prescreen("whatsapp me") == ["Recruiter on WhatsApp/Telegram"]
    assert prescreen("A normal offer letter from a reputable company, with an interview.") == []


def test_payload_per_mode():
    assert build_payload("text", text="  Offer  ") == {"input": "Offer", "sourceType": "text"}

    image = build_payload("image", image_base64="aGk=", image_mime_type="image/png")
    assert image["input"] == IMAGE_INSTRUCTION
    assert image["imageMimeType"] == "image/png"

    email = build_payload("email", sender_email="hr@acme.co")
    assert email["sourceType"] == "email"
    assert "Email body/header:\nNot provided" in email["input"]
    assert "Sender email: hr@acme.co" in email["input"]


@pytest.mark.parametrize("mode,message", [
    ("text", "Please paste your offer details first."),
    ("image", "Please upload a screenshot first."),
    ("email", "Please enter email details first."),
])
def test_payload_rejects_empty_input(mode, message):
    with pytest.raises(ValueError, match=message):
        build_payload(mode)


def test_report_keeps_input_and_analysis():
    result = normalize_result({"company": "Acme", "role": "Intern", "trustScore": 30})

    body = build_report(result, "email", email_header="Hi", sender_email="hr@acme.co", company_url="acme.co")

    assert body["companyName"] == "Acme"
    assert body["verdict"] == "DANGER"
    assert body["inputData"]["originalText"] == "Hi hr@acme.co acme.co"
    assert body["analysisData"]["subScores"]["processFlags"] == 20
    assert body["analysisData"]["resourceLinks"][0]["url"] == "https://www.cybercrime.gov.in/"
    assert body["isPublic"] is True


def test_missing_verdict_is_derived_from_score():
    assert [normalize_result({"trustScore": s}).verdict for s in (50, 80, 30)] == ["WARNING", "SAFE", "DANGER"]


def test_payment_method_flag():
    assert prescreen("They asked me to send check via Zelle before joining") == ["Unusual payment method"]
