"""Tests for environment settings and rule-file loading."""

from pathlib import Path

import pytest

from jobalert.config import DEFAULT_WINDOW_DAYS, ConfigError, Settings, load_settings, parse_window
from jobalert.rules import DEFAULT_RULES, load_rules

ROOT = Path(__file__).resolve().parents[2]

ENV_KEYS = (
    "STORAGE_CONNECTION_STRING",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "TIME_WINDOW",
    "ADZUNA_APP_ID",
    "ADZUNA_APP_KEY",
    "RAPIDAPI_KEY",
    "RULES_PATH",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestParseWindow:
    @pytest.mark.parametrize(
        ("value", "days"),
        [("DAY", 1), ("week", 7), ("MONTH", 30), ("1", 1), ("7", 7), ("30", 30), ("", DEFAULT_WINDOW_DAYS)],
    )
    def test_valid(self, value: str, days: int) -> None:
        assert parse_window(value) == days

    @pytest.mark.parametrize("value", ["FORTNIGHT", "14", "-1"])
    def test_invalid_falls_back(self, value: str) -> None:
        assert parse_window(value) == DEFAULT_WINDOW_DAYS


class TestLoadSettings:
    def test_reads_environment(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("STORAGE_CONNECTION_STRING", "sqlite:///state.db")
        clean_env.setenv("TELEGRAM_BOT_TOKEN", " 123:abc ")
        clean_env.setenv("TELEGRAM_CHAT_ID", "42")
        clean_env.setenv("TIME_WINDOW", "WEEK")
        clean_env.setenv("RAPIDAPI_KEY", "rk")

        settings = load_settings()
        assert settings.storage_connection == "sqlite:///state.db"
        assert settings.bot_token == "123:abc"
        assert settings.window_days == 7
        assert settings.env("RAPIDAPI_KEY") == "rk"
        assert settings.env("ADZUNA_APP_ID") == ""
        assert settings.missing() == []

    def test_window_argument_overrides_env(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("TIME_WINDOW", "WEEK")
        assert load_settings("1").window_days == 1
        assert load_settings(30).window_days == 30

    def test_missing_required(self, clean_env: pytest.MonkeyPatch) -> None:
        settings = load_settings()
        assert settings.missing() == ["STORAGE_CONNECTION_STRING", "TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID"]
        with pytest.raises(ConfigError, match="TELEGRAM_CHAT_ID"):
            settings.require()

    def test_require_passes_when_complete(self) -> None:
        Settings(storage_connection="x", bot_token="t", chat_id="c").require()


class TestLoadRules:
    def test_no_path_returns_defaults(self) -> None:
        assert load_rules(None) is DEFAULT_RULES
        assert load_rules("") is DEFAULT_RULES

    def test_override(self, tmp_path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text(
            "preferred_cities: [Mysore, Pune]\n"
            "max_years: 3\n"
            "location_points:\n"
            "  - [[mysore], 12]\n",
            encoding="utf-8",
        )
        rules = load_rules(path)
        assert rules.preferred_cities == ("Mysore", "Pune")
        assert rules.max_years == 3
        assert rules.location_points == ((("mysore",), 12),)
        assert rules.domain_keywords == DEFAULT_RULES.domain_keywords

    def test_example_file_loads(self) -> None:
        rules = load_rules(ROOT / "config" / "rules.example.yaml")
        assert "Remote India" in rules.preferred_cities

    def test_unknown_table(self, tmp_path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("favourite_colour: blue\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Unknown rule tables"):
            load_rules(path)

    def test_not_a_mapping(self, tmp_path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_rules(path)

    def test_bad_yaml(self, tmp_path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("max_years: [1, 2\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_rules(path)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "nope.yaml")

    @pytest.mark.parametrize(
        "body",
        [
            'max_years: "2"\n',
            "max_years: true\n",
            "preferred_cities: Pune\n",
            "preferred_cities: [Pune, 7]\n",
            "keyword_points:\n  - [azure, 30]\n",
            "recency_points:\n  - [1, 20, 5]\n",
        ],
    )
    def test_wrong_shape_rejected(self, tmp_path, body: str) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text(body, encoding="utf-8")
        with pytest.raises(ValueError, match="wrong shape"):
            load_rules(path)

    def test_float_recency_threshold_accepted(self, tmp_path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("recency_points:\n  - [0.5, 25]\n", encoding="utf-8")
        assert load_rules(path).recency_points == ((0.5, 25),)
