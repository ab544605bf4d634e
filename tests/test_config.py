"""Tests for mimic.config."""

from pathlib import Path

import pytest

from mimic.config import DEFAULT_DATA_DIR, Settings
from mimic.markov import DEFAULT_MAX_LINE_TOKENS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so teardown also removes anything load_dotenv() added
    for name in ("DATA_DIR", "SLACK_BOT_TOKEN", "SLACK_SIGNING_SECRET", "SLACK_BOT_USER_ID",
                 "SLACK_API_URL", "MAX_LINE_TOKENS", "HOST", "PORT", "LOG_LEVEL"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings.from_env(env_file=None)
        assert settings.data_dir == DEFAULT_DATA_DIR
        assert settings.max_line_tokens == DEFAULT_MAX_LINE_TOKENS
        assert settings.slack_signing_secret == ""
        assert settings.port == 3000

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATA_DIR", "/srv/mimic")
        monkeypatch.setenv("SLACK_BOT_USER_ID", "UBOT")
        monkeypatch.setenv("MAX_LINE_TOKENS", "12")
        monkeypatch.setenv("PORT", "8080")
        settings = Settings.from_env(env_file=None)
        assert settings.data_dir == Path("/srv/mimic")
        assert settings.slack_bot_user_id == "UBOT"
        assert settings.max_line_tokens == 12
        assert settings.port == 8080

    def test_env_file_loaded(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("SLACK_BOT_TOKEN=xoxb-from-file\n")
        settings = Settings.from_env(env_file=env_file)
        assert settings.slack_bot_token == "xoxb-from-file"
