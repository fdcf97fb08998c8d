"""Send messages through the Telegram Bot API."""
from __future__ import annotations

import requests

from jobalert.config import NOTIFY_TIMEOUT
from jobalert.log import get_logger
from jobalert.models import SendResult

log = get_logger(__name__)

API_BASE = "https://api.telegram.org"


class TelegramNotifier:
    def __init__(
        self,
        token: str,
        chat_id: str,
        timeout: float = NOTIFY_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.token = token
        self.chat_id = chat_id
        self.timeout = timeout
        self._http = session or requests

    def _url(self, method: str) -> str:
        return f"{API_BASE}/bot{self.token}/{method}"

    def send(self, text: str, preview: bool = False) -> SendResult:
        """POST one HTML message. Never raises; failures come back in the result."""
        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": not preview,
        }
        try:
            r = self._http.post(self._url("sendMessage"), json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            log.error("Telegram send failed: %s", exc)
            return SendResult(ok=False, error=str(exc)[:200])

        if r.status_code >= 300:
            detail = _description(r) or f"HTTP {r.status_code}"
            log.error("Telegram send failed: %s", detail)
            return SendResult(ok=False, error=detail)
        try:
            body = r.json()
        except ValueError:
            body = {}
        if isinstance(body, dict) and body.get("ok") is False:
            detail = body.get("description") or "Telegram returned ok=false"
            log.error("Telegram send failed: %s", detail)
            return SendResult(ok=False, error=detail)
        return SendResult(ok=True)

    def check(self) -> tuple[bool, str]:
        """Verify the bot token with getMe."""
        try:
            r = self._http.get(self._url("getMe"), timeout=self.timeout)
        except requests.RequestException as exc:
            return False, f"Telegram error: {exc}"
        if r.status_code != 200:
            return False, _description(r) or f"HTTP {r.status_code}"
        try:
            data = r.json()
        except ValueError:
            return False, "Invalid response from Telegram"
        if not data.get("ok"):
            return False, data.get("description", "Unknown error")
        return True, f"Connected as @{data.get('result', {}).get('username', '?')}"


def _description(r: requests.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        return str(body.get("description") or "")
    return ""
