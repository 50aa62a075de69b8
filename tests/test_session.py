import pytest

from placement_portal.api import ApiClient, ApiError, PortalAPI
from placement_portal.events import SessionChannel
from placement_portal.session import AuthState, SessionProvider, is_public_route
from placement_portal.storage import TOKEN_KEY, USER_KEY, MemoryStorage

from conftest import BASE_URL, FakeHTTP, FakeResponse


def _me_by_auth(student_payload, *, cookie_ok=False, token="good"):
    """/auth/me answering the cookie check and/or the bearer-token check."""
    def respond(call):
        auth = call["headers"].get("Authorization")
        if auth is None and cookie_ok:
            return FakeResponse(200, {"user": student_payload})
        if auth == f"Bearer {token}":
            return FakeResponse(200, student_payload)
        return FakeResponse(401, {"message": "Not authorized"})
    return respond


def test_cookie_session_restores_without_token(api, http, storage, channel, student_payload):
    http.handle("GET", "/auth/me", _me_by_auth(student_payload, cookie_ok=True))
    session = SessionProvider(api, storage, channel=channel)

    user = session.rehydrate("/student/profile")

    assert user.email == "asha@example.edu"
    assert session.state is AuthState.AUTHENTICATED
    assert session.loading is False
    assert session.is_student
    assert len(http.calls) == 1
    assert storage.get(USER_KEY)["_id"] == "u1"


def test_no_cookie_and_no_token_stays_signed_out(api, http, storage, channel, student_payload):
    http.handle("GET", "/auth/me", _me_by_auth(student_payload))
    session = SessionProvider(api, storage, channel=channel)

    assert session.rehydrate("/") is None
    assert session.state is AuthState.UNAUTHENTICATED
    assert session.loading is False
    assert len(http.calls) == 1


def test_falls_back_to_stored_token(api, http, storage, channel, student_payload):
    storage.set(TOKEN_KEY, "good")
    http.handle("GET", "/auth/me", _me_by_auth(student_payload))
    session = SessionProvider(api, storage, channel=channel)

    user = session.rehydrate("/")

    assert user.id == "u1"
    assert session.state is AuthState.AUTHENTICATED
    assert [("Authorization" in c["headers"]) for c in http.calls] == [False, True]


def test_rejected_token_clears_credentials(api, http, storage, channel, student_payload):
    storage.set(TOKEN_KEY, "expired")
    storage.set(USER_KEY, student_payload)
    http.handle("GET", "/auth/me", _me_by_auth(student_payload))
    session = SessionProvider(api, storage, channel=channel)

    assert session.rehydrate("/") is None
    assert storage.get(TOKEN_KEY) is None
    assert storage.get(USER_KEY) is None
    assert session.user is None
    assert session.loading is False


@pytest.mark.parametrize("route", ["/login", "/register", "/auth/callback", "/portfolios/asha"])
def test_public_routes_skip_the_check(api, http, storage, channel, route):
    session = SessionProvider(api, storage, channel=channel)

    assert is_public_route(route)
    assert session.rehydrate(route) is None
    assert http.calls == []
    assert session.loading is False


def _browser(payload=None, token=None):
    """An API stack for one browser: its own storage, channel and cookie jar."""
    http = FakeHTTP()
    storage = MemoryStorage()
    channel = SessionChannel()
    api = PortalAPI(ApiClient(storage, base_url=BASE_URL, channel=channel, session=http))
    if payload is not None:
        http.route("POST", "/auth/login", {"token": token, "user": payload})
    return api, storage, channel, http


def test_login_stays_inside_its_browser(student_payload):
    manager_payload = {**student_payload, "_id": "m1", "email": "meera@example.edu",
                       "role": "manager", "firstName": "Meera"}
    s_api, s_store, s_channel, _ = _browser(student_payload, "t-student")
    m_api, m_store, m_channel, _ = _browser(manager_payload, "t-manager")
    v_api, v_store, v_channel, v_http = _browser()
    v_http.handle("GET", "/auth/me", lambda call: FakeResponse(401, {"message": "Not authorized"}))
    student = SessionProvider(s_api, s_store, channel=s_channel)
    manager = SessionProvider(m_api, m_store, channel=m_channel)
    visitor = SessionProvider(v_api, v_store, channel=v_channel)

    student.login("asha@example.edu", "secret")
    manager.login("meera@example.edu", "secret")

    assert student.user.id == "u1"
    assert student.is_student
    assert s_store.get(TOKEN_KEY) == "t-student"
    assert manager.role == "manager"
    assert visitor.rehydrate("/") is None
    assert visitor.user is None
    assert v_store.get(TOKEN_KEY) is None


def test_logout_stays_inside_its_browser(student_payload):
    a_api, a_store, a_channel, a_http = _browser(student_payload, "t-a")
    b_api, b_store, b_channel, b_http = _browser(student_payload, "t-b")
    a_http.route("POST", "/auth/logout", {"ok": True})
    first = SessionProvider(a_api, a_store, channel=a_channel)
    second = SessionProvider(b_api, b_store, channel=b_channel)
    first.login("asha@example.edu", "secret")
    second.login("asha@example.edu", "secret")

    first.logout()

    assert first.user is None
    assert second.is_authenticated
    assert b_store.get(TOKEN_KEY) == "t-b"


def test_login_reaches_other_tabs_of_the_same_browser(api, http, storage, channel, student_payload):
    http.route("POST", "/auth/login", {"token": "t-9", "user": student_payload})
    here = SessionProvider(api, storage, channel=channel)
    there = SessionProvider(api, storage, channel=channel)

    here.login("asha@example.edu", "secret")

    assert storage.get(TOKEN_KEY) == "t-9"
    assert there.is_authenticated
    assert there.user.display_name == "Asha Rao"


def test_bad_login_raises_and_stays_signed_out(api, http, storage, channel):
    http.route("POST", "/auth/login", {"message": "Invalid credentials"}, status=401)
    session = SessionProvider(api, storage, channel=channel)

    with pytest.raises(ApiError):
        session.login("asha@example.edu", "nope")

    assert not session.is_authenticated
    assert storage.get(TOKEN_KEY) is None


def test_logout_clears_state_even_when_backend_fails(api, http, storage, channel, student_payload):
    http.route("POST", "/auth/login", {"token": "t-9", "user": student_payload})
    http.route("POST", "/auth/logout", {"message": "boom"}, status=500)
    here = SessionProvider(api, storage, channel=channel)
    there = SessionProvider(api, storage, channel=channel)
    here.login("asha@example.edu", "secret")

    here.logout()

    assert here.user is None
    assert there.user is None
    assert storage.get(TOKEN_KEY) is None


def test_expired_token_elsewhere_signs_everyone_out(api, http, storage, channel, student_payload):
    http.route("POST", "/auth/login", {"token": "t-9", "user": student_payload})
    http.route("GET", "/jobs", {"message": "jwt expired"}, status=401)
    session = SessionProvider(api, storage, channel=channel)
    session.login("asha@example.edu", "secret")

    with pytest.raises(ApiError):
        api.jobs.list()

    assert session.user is None
    assert session.state is AuthState.UNAUTHENTICATED


def test_update_user_merges_fields(api, http, storage, channel, student_payload):
    http.route("POST", "/auth/login", {"token": "t-9", "user": student_payload})
    session = SessionProvider(api, storage, channel=channel)
    session.login("asha@example.edu", "secret")

    session.update_user({"firstName": "Ashwini"})

    assert session.user.display_name == "Ashwini Rao"
    assert session.user.email == "asha@example.edu"


def test_close_unsubscribes(api, storage, channel):
    session = SessionProvider(api, storage, channel=channel)
    session.close()

    assert channel.subscriber_count("auth:login") == 0
    assert channel.subscriber_count("auth:logout") == 0
