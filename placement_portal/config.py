"""Load env and screen configuration."""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from placement_portal.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SCREENS_PATH: Path = CONFIG_DIR / "screens.yaml"
DATA_DIR: Path = ROOT_DIR / "data"

DEFAULT_API_URL = "http://localhost:5001"
FILTER_MODES = ("client", "server")

# Used when config/screens.yaml is missing or a screen is not listed in it.
DEFAULT_SCREENS: dict[str, dict[str, Any]] = {
    "my_applications": {"filter_mode": "client"},
    "self_applications": {"filter_mode": "client"},
    "self_applications_review": {"filter_mode": "client"},
    "skill_approvals": {"filter_mode": "client"},
    "profile_approvals": {"filter_mode": "client"},
    "forum": {"filter_mode": "client"},
    "notifications": {"filter_mode": "client"},
    "scam_reports": {"filter_mode": "server"},
    "readiness_review": {"filter_mode": "server"},
    "criteria_config": {"filter_mode": "client"},
    "jobs": {"filter_mode": "server"},
    "coordinator_jobs": {"filter_mode": "server"},
    "students": {"filter_mode": "server"},
    "skills": {"filter_mode": "client"},
}
DEFAULT_POLLING: dict[str, float] = {"navbar": 30.0, "sidebar": 5.0}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def api_base_url() -> str:
    """Backend origin with trailing slashes stripped and `/api` appended."""
    raw = get_env("PORTAL_API_URL") or DEFAULT_API_URL
    return raw.rstrip("/") + "/api"


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


@lru_cache()
def load_screen_config(path: Path | None = None) -> dict[str, Any]:
    """Read config/screens.yaml, filling gaps from the built-in defaults."""
    path = path or SCREENS_PATH
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        log.debug("No screen config at %s, using defaults", path)

    screens = {name: dict(cfg) for name, cfg in DEFAULT_SCREENS.items()}
    for name, cfg in (data.get("screens") or {}).items():
        screens.setdefault(name, {}).update(cfg or {})

    polling = dict(DEFAULT_POLLING)
    polling.update(data.get("polling") or {})

    return {"screens": screens, "polling": polling}


def filter_mode(screen: str) -> str:
    mode = load_screen_config()["screens"].get(screen, {}).get("filter_mode", "client")
    if mode not in FILTER_MODES:
        log.warning("Unknown filter_mode %r for screen %s, falling back to client", mode, screen)
        return "client"
    return mode


def poll_interval(name: str) -> float:
    return float(load_screen_config()["polling"].get(name, DEFAULT_POLLING.get(name, 30.0)))
