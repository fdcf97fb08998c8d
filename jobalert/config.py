"""Load environment configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from jobalert.log import get_logger

log = get_logger(__name__)

load_dotenv()

TIME_WINDOWS: dict[str, int] = {"DAY": 1, "WEEK": 7, "MONTH": 30}
DEFAULT_WINDOW_DAYS = TIME_WINDOWS["MONTH"]

MAX_SCAN_LIMIT = 500
MAX_JOBS_PER_RUN = 50

SOURCE_TIMEOUT = 15.0
NOTIFY_TIMEOUT = 5.0


class ConfigError(RuntimeError):
    """Required configuration is missing; the run cannot start."""


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def parse_window(value: str) -> int:
    """Map ``DAY``/``WEEK``/``MONTH`` or ``1``/``7``/``30`` to days."""
    raw = (value or "").strip().upper()
    if not raw:
        return DEFAULT_WINDOW_DAYS
    if raw in TIME_WINDOWS:
        return TIME_WINDOWS[raw]
    if raw.isdigit() and int(raw) in TIME_WINDOWS.values():
        return int(raw)
    log.warning("Invalid TIME_WINDOW %r: using %d days", value, DEFAULT_WINDOW_DAYS)
    return DEFAULT_WINDOW_DAYS


@dataclass(frozen=True)
class Settings:
    storage_connection: str = ""
    bot_token: str = ""
    chat_id: str = ""
    window_days: int = DEFAULT_WINDOW_DAYS
    adzuna_app_id: str = ""
    adzuna_app_key: str = ""
    rapidapi_key: str = ""
    rules_path: str = ""
    scan_limit: int = MAX_SCAN_LIMIT
    max_alerts: int = MAX_JOBS_PER_RUN

    def missing(self) -> list[str]:
        required = {
            "STORAGE_CONNECTION_STRING": self.storage_connection,
            "TELEGRAM_BOT_TOKEN": self.bot_token,
            "TELEGRAM_CHAT_ID": self.chat_id,
        }
        return [name for name, value in required.items() if not value]

    def require(self) -> None:
        missing = self.missing()
        if missing:
            msg = f"Missing required configuration: {', '.join(missing)}"
            raise ConfigError(msg)

    def env(self, key: str) -> str:
        """Env-style lookup used by sources that need API keys."""
        return {
            "ADZUNA_APP_ID": self.adzuna_app_id,
            "ADZUNA_APP_KEY": self.adzuna_app_key,
            "RAPIDAPI_KEY": self.rapidapi_key,
        }.get(key, "")


def load_settings(window: str | int | None = None) -> Settings:
    """Build settings from the environment; ``window`` overrides TIME_WINDOW."""
    window_days = parse_window(str(window) if window is not None else get_env("TIME_WINDOW"))
    return Settings(
        storage_connection=get_env("STORAGE_CONNECTION_STRING"),
        bot_token=get_env("TELEGRAM_BOT_TOKEN"),
        chat_id=get_env("TELEGRAM_CHAT_ID"),
        window_days=window_days,
        adzuna_app_id=get_env("ADZUNA_APP_ID"),
        adzuna_app_key=get_env("ADZUNA_APP_KEY"),
        rapidapi_key=get_env("RAPIDAPI_KEY"),
        rules_path=get_env("RULES_PATH"),
    )
