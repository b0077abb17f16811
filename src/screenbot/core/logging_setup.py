"""Logging setup utilities for screenbot.

Provides a single setup function to configure application-wide logging with:
- Session-based file handler next to config.ini
- Console handler for quick inspection during development
- Configurable log level via config.ini (DEFAULT.log_level) or a parameter
- Automatic retention of the last 3 sessions

Usage:
    from screenbot.core.logging_setup import setup_logging
    setup_logging(config_manager)

This creates logs/session-YYYYmmdd_HHMMSS/screenbot.log next to config.ini.
"""
from __future__ import annotations

import logging
import os
import shutil
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

SESSION_ENV = "SB_LOG_SESSION_DIR"


def _level_from_str(value: Optional[str]) -> int:
    if not value:
        return logging.INFO
    v = str(value).strip().upper()
    mapping = {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
        "NOTSET": logging.NOTSET,
    }
    return mapping.get(v, logging.INFO)


def get_log_dir(config_manager) -> Path:
    """Return directory path for logs next to the config.ini."""
    base_dir = Path(getattr(config_manager, "config_path")).parent
    log_dir = base_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_artifacts_dir(config_manager, name: str = "artifacts") -> Path:
    """Return directory path for screenshots and other artifacts.

    If a session directory is active (SB_LOG_SESSION_DIR), artifacts are stored
    under that session directory.
    """
    session_env = os.environ.get(SESSION_ENV, "").strip()
    if session_env:
        out_dir = Path(session_env) / name
    else:
        out_dir = Path(getattr(config_manager, "config_path")).parent / name
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir


def get_session_dir(config_manager) -> Path:
    """Create and return a new session directory under logs/."""
    base = get_log_dir(config_manager)
    session = base / datetime.now().strftime("session-%Y%m%d_%H%M%S")
    session.mkdir(parents=True, exist_ok=True)
    return session


def prune_old_sessions(log_dir: Path, keep: int = 3) -> None:
    """Keep only the most recent 'keep' session directories inside log_dir."""
    entries = [p for p in log_dir.iterdir() if p.is_dir() and p.name.startswith("session-")]
    entries.sort(key=lambda p: (p.stat().st_mtime, p.name), reverse=True)
    for old in entries[keep:]:
        shutil.rmtree(old, ignore_errors=True)


def setup_logging(config_manager, level: Optional[Union[str, int]] = None) -> Path:
    """Configure root logger with a session-based file and console handler.

    Returns the created session directory Path.

    - File: logs/session-YYYYmmdd_HHMMSS/screenbot.log (keep last 3 sessions)
    - Console: stderr, same level
    - Level: from parameter if provided, else DEFAULT.log_level in config, else INFO
    """
    if isinstance(level, int):
        lvl = level
    elif isinstance(level, str):
        lvl = _level_from_str(level)
    else:
        lvl = _level_from_str(getattr(config_manager, "get", lambda *_: None)("log_level"))

    logger = logging.getLogger()
    logger.setLevel(lvl)

    # Clear existing handlers to avoid duplicates on re-run
    for h in logger.handlers[:]:
        logger.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    log_dir = get_log_dir(config_manager)
    session_dir = get_session_dir(config_manager)
    os.environ[SESSION_ENV] = str(session_dir)

    fh = logging.FileHandler(session_dir / "screenbot.log", encoding="utf-8", delay=True)
    fh.setLevel(lvl)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(lvl)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    prune_old_sessions(log_dir, keep=3)

    logging.getLogger(__name__).debug("logging: session directory %s", session_dir)
    return session_dir
