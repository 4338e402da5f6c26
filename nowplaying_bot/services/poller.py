"""
Poll loop - one cycle per interval:
  now playing → history check → download → publish → history update → cleanup
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from nowplaying_bot.services.downloader import AudioDownloader, DownloadError
from nowplaying_bot.services.history import TrackHistory
from nowplaying_bot.services.publisher import PublishError, TelegramPublisher
from nowplaying_bot.services.spotify import SpotifyClient, SpotifyError
from nowplaying_bot.utils.http_client import HttpError

logger = logging.getLogger(__name__)

_CYCLE_ERRORS = (HttpError, SpotifyError, DownloadError, PublishError)


class CycleOutcome(str, Enum):
    NOTHING_PLAYING = "nothing_playing"
    ALREADY_PROCESSED = "already_processed"
    PUBLISHED = "published"


@dataclass
class PollState:
    """State carried from one cycle to the next; lost on restart."""
    message_id: Optional[int] = None


class Poller:
    def __init__(
        self,
        spotify: SpotifyClient,
        downloader: AudioDownloader,
        publisher: TelegramPublisher,
        history: Optional[TrackHistory] = None,
        interval: float = 60,
        edit_message: bool = False,
    ):
        self._spotify = spotify
        self._downloader = downloader
        self._publisher = publisher
        self._history = history
        self._interval = interval
        self._edit_message = edit_message

    async def run_forever(self, state: Optional[PollState] = None) -> None:
        state = state or PollState()
        logger.info(
            "Polling started",
            extra={
                "interval": self._interval,
                "history": self._history is not None,
                "edit_message": self._edit_message,
            },
        )
        while True:
            await asyncio.sleep(self._interval)
            await self.tick(state)

    async def tick(self, state: PollState) -> Optional[CycleOutcome]:
        """Run one cycle, logging instead of raising on failure."""
        try:
            return await self.run_cycle(state)
        except _CYCLE_ERRORS as exc:
            logger.warning("Cycle failed", extra={"error": str(exc), "kind": type(exc).__name__})
        except Exception:
            logger.exception("Unexpected error in cycle")
        return None

    async def run_cycle(self, state: PollState) -> CycleOutcome:
        track = await self._spotify.get_currently_playing()
        if track is None:
            logger.info("Nothing playing")
            return CycleOutcome.NOTHING_PLAYING

        key = track.key
        logger.info("Now playing", extra={"track": key})

        if self._history is not None and key in self._history:
            logger.info("Already processed, skipping download", extra={"track": key})
            return CycleOutcome.ALREADY_PROCESSED

        try:
            logger.info("Downloading", extra={"track": key})
            audio_path = await self._downloader.download(track.search_query)
            thumbnail = self._downloader.find_thumbnail()

            logger.info("Uploading to Telegram", extra={"track": key})
            message_id = await self._publisher.publish(
                audio_path,
                title=track.name,
                performer=track.performer,
                thumbnail=thumbnail,
                message_id=state.message_id if self._edit_message else None,
            )
        finally:
            self._downloader.cleanup()

        if self._edit_message:
            state.message_id = message_id
        if self._history is not None:
            self._history.mark(key)
        return CycleOutcome.PUBLISHED
