import threading

import pytest

from placement_portal import config
from placement_portal.config import filter_mode, load_screen_config, poll_interval
from placement_portal.events import SessionChannel, get_channel, release_channel
from placement_portal.poller import Poller, UnreadCounter
from placement_portal import storage as storage_mod
from placement_portal.storage import (
    TOKEN_KEY,
    USER_KEY,
    LocalStorage,
    browser_storage,
    is_browser_id,
    new_browser_id,
)


# ── Channel ──────────────────────────────────────────────────────────────


class Listener:
    def __init__(self):
        self.seen = []

    def handle(self, payload):
        self.seen.append(payload)


def test_publish_skips_the_sender():
    channel = SessionChannel()
    me, other = Listener(), Listener()
    channel.subscribe("auth:login", me.handle)
    channel.subscribe("auth:login", other.handle)

    delivered = channel.publish("auth:login", {"_id": "u1"}, sender=me)

    assert delivered == 1
    assert me.seen == []
    assert other.seen == [{"_id": "u1"}]


def test_failing_subscriber_does_not_block_others():
    channel = SessionChannel()
    seen = []

    def broken(_payload):
        raise RuntimeError("boom")

    channel.subscribe("auth:logout", broken)
    channel.subscribe("auth:logout", seen.append)

    assert channel.publish("auth:logout") == 1
    assert seen == [None]


def test_unsubscribe():
    channel = SessionChannel()
    unsubscribe = channel.subscribe("auth:login", print)

    unsubscribe()
    unsubscribe()

    assert channel.subscriber_count("auth:login") == 0


# ── Storage ──────────────────────────────────────────────────────────────


def test_file_storage_persists_and_clears_credentials(tmp_path):
    path = tmp_path / "store.json"
    LocalStorage(path).set(TOKEN_KEY, "t-1")
    store = LocalStorage(path)
    store.set(USER_KEY, {"_id": "u1"})
    store.set("theme", "dark")

    assert store.get(TOKEN_KEY) == "t-1"

    store.clear_credentials()

    reopened = LocalStorage(path)
    assert reopened.get(TOKEN_KEY) is None
    assert reopened.get(USER_KEY) is None
    assert reopened.get("theme") == "dark"


def test_corrupt_storage_reads_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json")

    assert LocalStorage(path).get(TOKEN_KEY) is None


def test_each_browser_gets_its_own_storage_file(tmp_path, monkeypatch):
    monkeypatch.setattr(storage_mod, "SESSIONS_DIR", tmp_path / "sessions")
    first, second = new_browser_id(), new_browser_id()

    browser_storage(first).set(TOKEN_KEY, "t-first")

    assert first != second
    assert browser_storage(first).get(TOKEN_KEY) == "t-first"
    assert browser_storage(second).get(TOKEN_KEY) is None
    assert browser_storage(first).path == tmp_path / "sessions" / f"{first}.json"


@pytest.mark.parametrize("value", ["", "../etc/passwd", "ABCDEF" * 6, None, 42])
def test_browser_ids_are_validated(value):
    assert not is_browser_id(value)
    with pytest.raises(ValueError):
        browser_storage(value)


def test_channels_are_scoped_per_browser():
    first, second = new_browser_id(), new_browser_id()
    heard = Listener()
    unsubscribe = get_channel(first).subscribe("auth:login", heard.handle)

    get_channel(second).publish("auth:login", {"_id": "m1"})
    get_channel(first).publish("auth:login", {"_id": "u1"})

    assert heard.seen == [{"_id": "u1"}]
    assert get_channel(first) is get_channel(first)

    unsubscribe()
    channel = get_channel(first)
    release_channel(first)
    assert get_channel(first) is not channel

    with pytest.raises(ValueError):
        get_channel("")


# ── Config ───────────────────────────────────────────────────────────────


def test_screen_config_overrides_and_defaults(tmp_path, monkeypatch):
    path = tmp_path / "screens.yaml"
    path.write_text(
        "screens:\n"
        "  forum:\n"
        "    filter_mode: server\n"
        "  notifications:\n"
        "    filter_mode: sideways\n"
        "polling:\n"
        "  sidebar: 2\n"
    )
    monkeypatch.setattr(config, "SCREENS_PATH", path)
    load_screen_config.cache_clear()

    assert filter_mode("forum") == "server"
    assert filter_mode("notifications") == "client"
    assert filter_mode("scam_reports") == "server"
    assert filter_mode("not_a_screen") == "client"
    assert poll_interval("sidebar") == 2
    assert poll_interval("navbar") == 30


def test_missing_screen_config_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "SCREENS_PATH", tmp_path / "absent.yaml")
    load_screen_config.cache_clear()

    assert filter_mode("readiness_review") == "server"
    assert filter_mode("my_applications") == "client"


# ── Poller ───────────────────────────────────────────────────────────────


def test_poller_ticks_immediately_and_survives_errors():
    ticks = []
    twice = threading.Event()

    def tick():
        ticks.append(1)
        if len(ticks) >= 2:
            twice.set()
        raise RuntimeError("backend down")

    poller = Poller(tick, interval=0.01, name="test").start()
    try:
        assert twice.wait(2)
        assert poller.running
    finally:
        poller.stop()

    assert not poller.running


def test_stopped_poller_stops_calling():
    first = threading.Event()
    poller = Poller(first.set, interval=60, name="slow").start()

    assert first.wait(2)
    poller.stop()

    assert not poller.running


def test_unread_counter_reads_count(api, http):
    http.route("GET", "/notifications/unread-count", {"count": 12})
    counter = UnreadCounter(api, "sidebar")

    counter.refresh()

    assert counter.count == 12
    assert counter.poller.interval == 5


def test_poller_stops_once_its_owner_is_gone():
    owner = {"alive": True}
    ticks = []
    ticked = threading.Event()
    cleaned = threading.Event()

    def tick():
        ticks.append(1)
        ticked.set()

    poller = Poller(tick, interval=0.01, name="orphan",
                    alive=lambda: owner["alive"], on_orphaned=cleaned.set).start()
    assert ticked.wait(2)

    owner["alive"] = False

    assert cleaned.wait(2)
    poller._thread.join(2)
    assert not poller.running
    count = len(ticks)
    assert not threading.Event().wait(0.05)
    assert len(ticks) == count


def test_counter_without_a_live_session_never_polls(api, http):
    http.route("GET", "/notifications/unread-count", {"count": 3})
    orphaned = threading.Event()
    counter = UnreadCounter(api, "navbar", alive=lambda: False, on_orphaned=orphaned.set).start()

    assert orphaned.wait(2)
    counter.poller._thread.join(2)
    assert not counter.running
    assert http.calls == []
    assert counter.count == 0


def test_failing_liveness_check_counts_as_gone():
    def alive():
        raise RuntimeError("runtime shut down")

    stopped = threading.Event()
    poller = Poller(lambda: None, interval=0.01, name="flaky", alive=alive, on_orphaned=stopped.set).start()

    assert stopped.wait(2)
    poller._thread.join(2)
    assert not poller.running
