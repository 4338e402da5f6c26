import asyncio

import pytest

import main
from nowplaying_bot.config.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def quiet_startup(monkeypatch):
    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestStartup:
    def test_corrupt_history_exits_1(self, required_env, monkeypatch):
        (required_env / "data.json").write_text("{broken")
        monkeypatch.setenv("UPLOAD", "true")

        assert asyncio.run(main.main(Settings(_env_file=None))) == 1

    def test_non_boolean_history_exits_1(self, required_env, monkeypatch):
        (required_env / "data.json").write_text('{"Song A - Artist X": "false"}')
        monkeypatch.setenv("UPLOAD", "true")

        assert asyncio.run(main.main(Settings(_env_file=None))) == 1

    def test_invalid_bot_token_exits_1(self, required_env, monkeypatch):
        monkeypatch.setenv("BOT_TOKEN", "not-a-token")

        assert asyncio.run(main.main(Settings(_env_file=None))) == 1

    def test_missing_setting_exits_1(self, required_env, monkeypatch):
        monkeypatch.delenv("SPOTIFY_REFRESH_TOKEN")

        with pytest.raises(SystemExit) as exc_info:
            main.load_settings()
        assert exc_info.value.code == 1

    def test_valid_settings_load(self, required_env):
        assert main.load_settings().CHAT_ID == "-1001234567890"
