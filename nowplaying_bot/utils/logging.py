"""
Structured JSON logging.
Outputs JSON lines in production, human-readable otherwise.
"""
import logging
import sys

import json_log_formatter


class JsonFormatter(json_log_formatter.JSONFormatter):
    """JSON lines with level and logger name next to the message."""

    def json_record(self, message, extra, record):
        entry = super().json_record(message, extra, record)
        entry["level"] = record.levelname
        entry["logger"] = record.name
        return entry


def setup_logging(level: str = "INFO", json_output: bool = True) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)

    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Quiet noisy libraries
    for lib in ("aiogram", "aiohttp", "urllib3"):
        logging.getLogger(lib).setLevel(logging.WARNING)
