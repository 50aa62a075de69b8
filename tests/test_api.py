import pytest
import requests

from placement_portal.api import ApiError
from placement_portal.config import api_base_url
from placement_portal.events import AUTH_LOGOUT
from placement_portal.storage import TOKEN_KEY, USER_KEY

from conftest import FakeResponse


def test_bearer_token_sent_when_stored(api, http, storage):
    storage.set(TOKEN_KEY, "tok-1")
    http.route("GET", "/jobs", [])

    api.jobs.list()

    assert http.calls[0]["headers"]["Authorization"] == "Bearer tok-1"


def test_cookie_only_request_omits_token(api, http, storage):
    storage.set(TOKEN_KEY, "tok-1")
    http.route("GET", "/auth/me", {"_id": "u1"})

    api.auth.me(use_token=False)

    assert "Authorization" not in http.calls[0]["headers"]


def test_empty_query_params_are_dropped(api, http):
    http.route("GET", "/scam-reports/public", {"reports": []})

    api.scam_reports.public({"page": 1, "verdict": "", "company": None})

    assert http.calls[0]["params"] == {"page": 1}


def test_error_carries_message_and_field_errors(api, http):
    http.route("POST", "/auth/register", {
        "message": "Validation failed",
        "errors": [{"path": "email", "msg": "Email already registered"}],
    }, status=400)

    with pytest.raises(ApiError) as excinfo:
        api.auth.register({"email": "taken@example.edu"})

    err = excinfo.value
    assert err.status == 400
    assert err.message == "Validation failed"
    assert err.field_errors == {"email": "Email already registered"}


def test_transport_failure_becomes_api_error(api, http):
    http.handle("GET", "/jobs", requests.ConnectionError("refused"))

    with pytest.raises(ApiError) as excinfo:
        api.jobs.list()

    assert excinfo.value.status == 0


def test_401_outside_auth_expires_the_session(api, http, storage, channel):
    storage.set(TOKEN_KEY, "stale")
    storage.set(USER_KEY, {"_id": "u1"})
    storage.set("theme", "dark")
    seen = []
    channel.subscribe(AUTH_LOGOUT, seen.append)
    http.route("GET", "/notifications", {"message": "Token expired"}, status=401)

    with pytest.raises(ApiError):
        api.notifications.list()

    assert storage.get(TOKEN_KEY) is None
    assert storage.get(USER_KEY) is None
    assert storage.get("theme") == "dark"
    assert seen == [None]


def test_401_on_login_does_not_broadcast_logout(api, http, storage, channel):
    storage.set(TOKEN_KEY, "keep")
    seen = []
    channel.subscribe(AUTH_LOGOUT, seen.append)
    http.route("POST", "/auth/login", {"message": "Invalid credentials"}, status=401)

    with pytest.raises(ApiError):
        api.auth.login("a@b.c", "wrong")

    assert storage.get(TOKEN_KEY) == "keep"
    assert seen == []


def test_verify_self_application_body(api, http):
    http.route("PATCH", "/self-applications/a1/verify", {"ok": True})

    api.self_applications.verify("a1", True, "Offer letter checked")

    assert http.calls[0]["json"] == {"isVerified": True, "verificationNotes": "Offer letter checked"}


def test_proof_file_switches_to_multipart(api, http):
    http.route("PATCH", "/job-readiness/my-status/linkedin", {"ok": True})

    api.job_readiness.update_my_criterion(
        "linkedin", {"selfReportedValue": "yes", "notes": ""}, ("proof.pdf", b"%PDF")
    )

    call = http.calls[0]
    assert call["json"] is None
    assert call["data"] == {"selfReportedValue": "yes"}
    assert call["files"] == {"proofFile": ("proof.pdf", b"%PDF")}


def test_company_name_is_url_quoted(api, http):
    http.route("GET", "/scam-reports/company/Acme%20Corp", {"reports": []})

    r = api.scam_reports.company("Acme Corp")

    assert r.data == {"reports": []}


def test_empty_body_yields_none(api, http):
    http.routes[("DELETE", "/notifications/n1")] = FakeResponse(204)

    assert api.notifications.delete("n1").data is None


def test_api_base_url_strips_trailing_slash(monkeypatch):
    monkeypatch.setenv("PORTAL_API_URL", "https://portal.example.edu/")

    assert api_base_url() == "https://portal.example.edu/api"
