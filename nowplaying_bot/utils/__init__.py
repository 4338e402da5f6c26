from nowplaying_bot.utils.http_client import HttpError, MalformedResponseError, build_session
from nowplaying_bot.utils.logging import setup_logging

__all__ = ["HttpError", "MalformedResponseError", "build_session", "setup_logging"]
