"""
Now-Playing Bot - Main Entrypoint
Polls Spotify for the current track and posts it to Telegram as audio.
"""
import asyncio
import logging
import sys

from aiogram import Bot
from aiogram.utils.token import TokenValidationError
from pydantic import ValidationError

from nowplaying_bot.config.settings import Settings, get_settings
from nowplaying_bot.services.downloader import AudioDownloader
from nowplaying_bot.services.history import HistoryError, TrackHistory
from nowplaying_bot.services.poller import Poller
from nowplaying_bot.services.publisher import TelegramPublisher
from nowplaying_bot.services.spotify import SpotifyClient
from nowplaying_bot.utils.http_client import build_session
from nowplaying_bot.utils.logging import setup_logging


def load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        setup_logging()
        logging.getLogger(__name__).error(
            "Invalid configuration",
            extra={"errors": [f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors()]},
        )
        sys.exit(1)


async def main(settings: Settings) -> int:
    setup_logging(settings.LOG_LEVEL, json_output=settings.ENV == "production")
    logger = logging.getLogger(__name__)

    history = None
    if settings.UPLOAD:
        try:
            history = TrackHistory.open(settings.HISTORY_FILE)
        except HistoryError as exc:
            logger.error("Failed to load history", extra={"error": str(exc)})
            return 1

    try:
        bot = Bot(token=settings.BOT_TOKEN)
    except TokenValidationError as exc:
        logger.error("Invalid BOT_TOKEN", extra={"error": str(exc)})
        return 1

    session = build_session()
    try:
        poller = Poller(
            spotify=SpotifyClient(
                session,
                settings.SPOTIFY_CLIENT_ID,
                settings.SPOTIFY_CLIENT_SECRET,
                settings.SPOTIFY_REFRESH_TOKEN,
                timeout=settings.SPOTIFY_TIMEOUT_SECONDS,
            ),
            downloader=AudioDownloader(settings.audio_path, settings.YTDLP_PATH),
            publisher=TelegramPublisher(bot, settings.CHAT_ID, timeout=settings.UPLOAD_TIMEOUT_SECONDS),
            history=history,
            interval=settings.POLL_INTERVAL_SECONDS,
            edit_message=settings.EDIT_MESSAGE,
        )
        logger.info("Starting bot", extra={"env": settings.ENV, "chat_id": settings.CHAT_ID})
        await poller.run_forever()
    finally:
        await session.close()
        await bot.session.close()
        logger.info("Bot stopped")
    return 0


def run() -> None:
    settings = load_settings()
    try:
        sys.exit(asyncio.run(main(settings)))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
