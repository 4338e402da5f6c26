"""
Track history for deduplication.
- JSON object on disk mapping track keys to true.
- Missing file means empty history.
- Saves overwrite the whole file through a temp file + rename.
"""
import json
import logging
import os
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)


class HistoryError(Exception):
    pass


def load(path: Path) -> Dict[str, bool]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        raise HistoryError(f"Cannot read history {path}: {exc}") from exc

    # Empty file counts as end of input, not corruption
    if not text.strip():
        return {}

    try:
        data = json.loads(text)
    except ValueError as exc:
        raise HistoryError(f"History {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise HistoryError(f"History {path} must hold a JSON object")
    bad = [key for key, value in data.items() if not isinstance(value, bool)]
    if bad:
        raise HistoryError(f"History {path} has non-boolean entries: {bad[:5]!r}")
    return data


def contains(mapping: Dict[str, bool], key: str) -> bool:
    return bool(mapping.get(key, False))


def save(path: Path, mapping: Dict[str, bool]) -> None:
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(mapping, fh, ensure_ascii=False)
            fh.write("\n")
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise HistoryError(f"Cannot write history {path}: {exc}") from exc


class TrackHistory:
    """In-memory history bound to its file."""

    def __init__(self, path: Path, entries: Dict[str, bool]):
        self._path = Path(path)
        self._entries = entries

    @classmethod
    def open(cls, path: Path) -> "TrackHistory":
        entries = load(path)
        logger.info("History loaded", extra={"path": str(path), "tracks": len(entries)})
        return cls(path, entries)

    def __contains__(self, key: str) -> bool:
        return contains(self._entries, key)

    def __len__(self) -> int:
        return len(self._entries)

    def mark(self, key: str) -> None:
        """Record key as processed; a failed write keeps the in-memory mark."""
        self._entries[key] = True
        try:
            save(self._path, self._entries)
        except HistoryError as exc:
            logger.error("Failed to save history", extra={"error": str(exc), "track": key})
