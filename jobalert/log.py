"""Logging setup: console at LOG_LEVEL, plus a daily DEBUG file under LOG_DIR."""
from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Named logger; the root handlers are installed on first use."""
    global _configured
    if not _configured:
        _install_handlers()
        _configured = True
    return logging.getLogger(name)


def set_level(level_name: str) -> None:
    """Raise or lower console verbosity after startup (``--verbose``)."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(min(level, root.level))
    for handler in root.handlers:
        if not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


def log_dir() -> Path:
    return Path(os.environ.get("LOG_DIR") or Path.cwd() / "logs")


def _formatter() -> logging.Formatter:
    return logging.Formatter(_FORMAT, datefmt=_DATE_FMT)


def _daily_file_handler(directory: Path) -> logging.FileHandler:
    directory.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(directory / f"jobalert_{date.today():%Y-%m-%d}.log", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_formatter())
    return handler


def _install_handlers() -> None:
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        # Someone (pytest, an embedding app) already owns the root logger.
        return

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(_formatter())
    root.addHandler(console)

    try:
        root.addHandler(_daily_file_handler(log_dir()))
    except OSError:
        # Read-only filesystem: console only.
        return
    root.setLevel(logging.DEBUG)
