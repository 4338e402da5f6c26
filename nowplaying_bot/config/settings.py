"""
Environment-based configuration using pydantic-settings.
Built once in main.py and handed to each component explicitly.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # ── Core ────────────────────────────────────────────────────────────────
    ENV: str = "production"
    LOG_LEVEL: str = "INFO"
    POLL_INTERVAL_SECONDS: int = 60

    # ── Telegram ────────────────────────────────────────────────────────────
    BOT_TOKEN: str
    CHAT_ID: str
    EDIT_MESSAGE: bool = False
    UPLOAD_TIMEOUT_SECONDS: int = 120

    # ── Spotify ─────────────────────────────────────────────────────────────
    SPOTIFY_CLIENT_ID: str
    SPOTIFY_CLIENT_SECRET: str
    SPOTIFY_REFRESH_TOKEN: str
    SPOTIFY_TIMEOUT_SECONDS: int = 10

    # ── History ─────────────────────────────────────────────────────────────
    UPLOAD: bool = False
    HISTORY_FILE: Path = Path("data.json")

    # ── Downloads ───────────────────────────────────────────────────────────
    WORK_DIR: Path = Path(".")
    AUDIO_FILENAME: str = "audio.mp3"
    YTDLP_PATH: str = "yt-dlp"

    @field_validator("WORK_DIR", mode="before")
    @classmethod
    def ensure_work_dir(cls, v: Path) -> Path:
        path = Path(v)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ValueError(f"cannot create {path}: {exc}") from exc
        return path

    @field_validator("POLL_INTERVAL_SECONDS", "SPOTIFY_TIMEOUT_SECONDS", "UPLOAD_TIMEOUT_SECONDS")
    @classmethod
    def positive_seconds(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive number of seconds")
        return v

    @property
    def audio_path(self) -> Path:
        return self.WORK_DIR / self.AUDIO_FILENAME


@lru_cache
def get_settings() -> Settings:
    return Settings()
