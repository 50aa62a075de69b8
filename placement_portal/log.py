"""Logging setup for the portal client, built on the standard library."""
from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(threadName)-14s  %(name)s  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries whose INFO/DEBUG output drowns out the portal's own request log.
NOISY_LOGGERS = ("urllib3", "watchdog", "streamlit.watcher")

_ready = False


def _file_logging_enabled() -> bool:
    return os.environ.get("PORTAL_LOG_TO_FILE", "true").strip().lower() in ("1", "true", "yes")


def log_file_for(day: date | None = None) -> Path:
    return LOG_DIR / f"portal_{(day or date.today()).isoformat()}.log"


def setup_logging(level: str | None = None) -> None:
    """Attach the console handler and, unless disabled, the daily log file.

    Safe to call repeatedly; Streamlit re-executes the app script on every
    interaction and only the first call installs handlers.
    """
    global _ready
    if _ready:
        return
    _ready = True

    name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    root = logging.getLogger()
    root.setLevel(min(resolved, logging.DEBUG) if _file_logging_enabled() else resolved)
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
    if root.handlers:
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(resolved)
    console.setFormatter(formatter)
    root.addHandler(console)

    if not _file_logging_enabled():
        return
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file_for(), encoding="utf-8")
    except OSError as exc:
        console.handle(logging.makeLogRecord({
            "name": __name__, "levelno": logging.WARNING, "levelname": "WARNING",
            "msg": "File logging disabled: %s", "args": (exc,),
        }))
        return
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
