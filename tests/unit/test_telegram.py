"""Tests for the Telegram notifier (HTTP mocked)."""

from unittest.mock import MagicMock

import requests

from jobalert.telegram import API_BASE, TelegramNotifier


def _response(status: int = 200, body: object = None) -> MagicMock:
    r = MagicMock()
    r.status_code = status
    if body is None:
        r.json.side_effect = ValueError("no json")
    else:
        r.json.return_value = body
    return r


def _notifier(session: MagicMock) -> TelegramNotifier:
    return TelegramNotifier("123:abc", "42", timeout=2, session=session)


class TestSend:
    def test_posts_html_message(self) -> None:
        session = MagicMock()
        session.post.return_value = _response(body={"ok": True})
        result = _notifier(session).send("<b>hi</b>")

        assert result.ok is True
        assert result.error is None
        args, kwargs = session.post.call_args
        assert args[0] == f"{API_BASE}/bot123:abc/sendMessage"
        assert kwargs["json"] == {
            "chat_id": "42",
            "text": "<b>hi</b>",
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        assert kwargs["timeout"] == 2

    def test_preview_enabled(self) -> None:
        session = MagicMock()
        session.post.return_value = _response(body={"ok": True})
        _notifier(session).send("x", preview=True)
        assert session.post.call_args.kwargs["json"]["disable_web_page_preview"] is False

    def test_network_error(self) -> None:
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("unreachable")
        result = _notifier(session).send("x")
        assert result.ok is False
        assert "unreachable" in result.error

    def test_http_error_with_description(self) -> None:
        session = MagicMock()
        session.post.return_value = _response(400, {"ok": False, "description": "Bad Request: chat not found"})
        result = _notifier(session).send("x")
        assert result.ok is False
        assert result.error == "Bad Request: chat not found"

    def test_http_error_without_body(self) -> None:
        session = MagicMock()
        session.post.return_value = _response(502)
        assert _notifier(session).send("x").error == "HTTP 502"

    def test_ok_false_in_body(self) -> None:
        session = MagicMock()
        session.post.return_value = _response(200, {"ok": False, "description": "flood wait"})
        result = _notifier(session).send("x")
        assert result.ok is False
        assert result.error == "flood wait"


class TestCheck:
    def test_connected(self) -> None:
        session = MagicMock()
        session.get.return_value = _response(body={"ok": True, "result": {"username": "job_bot"}})
        assert _notifier(session).check() == (True, "Connected as @job_bot")
        assert session.get.call_args.args[0].endswith("/getMe")

    def test_unauthorized(self) -> None:
        session = MagicMock()
        session.get.return_value = _response(401, {"ok": False, "description": "Unauthorized"})
        assert _notifier(session).check() == (False, "Unauthorized")

    def test_network_error(self) -> None:
        session = MagicMock()
        session.get.side_effect = requests.Timeout("timed out")
        ok, msg = _notifier(session).check()
        assert ok is False
        assert "timed out" in msg
