"""
Downloader service: wraps yt-dlp to find a track on YouTube and extract
its audio as mp3, along with a cover thumbnail.
"""
import asyncio
import logging
import shutil
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

_THUMBNAIL_EXTENSIONS = (".jpg", ".webp")


class DownloadError(Exception):
    pass


class AudioDownloader:
    def __init__(self, audio_path: Path, ytdlp_path: str = "yt-dlp"):
        self._audio_path = Path(audio_path)
        self._ytdlp = ytdlp_path

    async def download(self, query: str) -> Path:
        """
        Search YouTube for query and extract the first hit to audio_path.
        Blocks until yt-dlp exits; there is no timeout.
        """
        self._check_ytdlp()

        cmd = [
            self._ytdlp,
            "-x",
            "--audio-format", "mp3",
            "--write-thumbnail",
            "--convert-thumbnails", "jpg",
            "--no-playlist",
            "--no-progress",
            "--quiet",
            "--output", str(self._audio_path),
            f"ytsearch1:{query}",
        ]

        logger.info("Starting yt-dlp download", extra={"query": query[:120]})
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await proc.communicate()

        if proc.returncode != 0:
            err = stderr.decode(errors="replace").strip()
            raise DownloadError(f"yt-dlp exited with {proc.returncode}: {err[-300:]}")

        if not self._audio_path.exists():
            raise DownloadError("yt-dlp completed but no output file found")

        return self._audio_path

    def thumbnail_candidates(self) -> List[Path]:
        # yt-dlp appends the image extension to the full output name
        stems = [self._audio_path, self._audio_path.with_suffix("")]
        return [
            stem.with_name(stem.name + ext)
            for stem in stems
            for ext in _THUMBNAIL_EXTENSIONS
        ]

    def find_thumbnail(self) -> Optional[Path]:
        for candidate in self.thumbnail_candidates():
            if candidate.exists():
                return candidate
        logger.info("Thumbnail not found", extra={"audio": str(self._audio_path)})
        return None

    def cleanup(self) -> None:
        for path in [self._audio_path, *self.thumbnail_candidates()]:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Failed to remove temp file", extra={"path": str(path), "error": str(exc)})

    def _check_ytdlp(self) -> None:
        if not shutil.which(self._ytdlp):
            raise DownloadError(f"{self._ytdlp} is not installed or not in PATH")
