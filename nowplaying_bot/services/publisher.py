"""
Telegram publisher.
- First publish sends a new audio message (sendAudio).
- With a remembered message id, replaces that message's audio (editMessageMedia).
"""
import logging
from pathlib import Path
from typing import Optional, Union

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.types import FSInputFile, InputMediaAudio, Message

logger = logging.getLogger(__name__)


class PublishError(Exception):
    pass


class TelegramPublisher:
    def __init__(self, bot: Bot, chat_id: Union[int, str], timeout: int = 120):
        self._bot = bot
        self._chat_id = chat_id
        self._timeout = timeout

    async def publish(
        self,
        audio_path: Path,
        title: str,
        performer: str,
        thumbnail: Optional[Path] = None,
        message_id: Optional[int] = None,
    ) -> int:
        """Upload the audio and return the id of the message that carries it."""
        audio = FSInputFile(audio_path, filename=Path(audio_path).name)
        thumb = FSInputFile(thumbnail) if thumbnail else None

        try:
            if message_id is None:
                sent = await self._bot.send_audio(
                    chat_id=self._chat_id,
                    audio=audio,
                    title=title,
                    performer=performer,
                    thumbnail=thumb,
                    request_timeout=self._timeout,
                )
                result = sent.message_id
            else:
                media = InputMediaAudio(
                    media=audio,
                    title=title,
                    performer=performer,
                    thumbnail=thumb,
                )
                edited = await self._bot.edit_message_media(
                    media=media,
                    chat_id=self._chat_id,
                    message_id=message_id,
                    request_timeout=self._timeout,
                )
                result = edited.message_id if isinstance(edited, Message) else message_id
        except TelegramAPIError as exc:
            raise PublishError(f"Telegram rejected the upload ({type(exc).__name__}): {exc}") from exc

        logger.info(
            "Audio published",
            extra={"message_id": result, "edited": message_id is not None, "track": title},
        )
        return result
