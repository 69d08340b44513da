"""Audio challenge pipeline: download, encode, ask Gemini, clean up."""
from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import AsyncIterator, Optional
from urllib.parse import urlparse

from ..ai_agents.audio_challenge_agent import AudioChallengeAgent
from .downloader import FileFetcher
from .encoder import encode_file_async
from .key_pool import KeyPool
from .stats import RequestStats

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".mp3"
PROMPT_PREFIX = "Audio Challenge: "


def clean_result(text: str) -> str:
    """Drop embedded newlines and surrounding whitespace from a model answer."""

    return text.replace("\n", "").strip()


def temp_filename_for(url: str) -> str:
    extension = PurePosixPath(urlparse(url).path).suffix or DEFAULT_EXTENSION
    return f"{uuid.uuid4().hex}{extension}"


@dataclass
class AudioChallengeService:
    """Runs one pipeline per request.

    The only state shared between concurrent requests is the key pool and the
    counters; each request owns its temp file exclusively.
    """

    key_pool: KeyPool
    temp_dir: Path
    fetcher: FileFetcher = field(default_factory=FileFetcher)
    agent: AudioChallengeAgent = field(default_factory=AudioChallengeAgent)
    stats: RequestStats = field(default_factory=RequestStats)
    max_concurrent_requests: int = 0
    _slots: Optional[asyncio.Semaphore] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_concurrent_requests > 0:
            self._slots = asyncio.Semaphore(self.max_concurrent_requests)

    @asynccontextmanager
    async def temp_asset(self, url: str) -> AsyncIterator[Path]:
        """Reserve a unique temp path and delete whatever is there on exit."""

        path = self.temp_dir / temp_filename_for(url)
        logger.info("Temp file: %s", path)
        try:
            yield path
        finally:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not delete temp file %s: %s", path, exc)

    async def solve(self, url: str, title: str) -> str:
        """Return the cleaned Gemini answer for the audio at ``url``.

        Counters are updated here; any failure propagates to the caller after
        the temp file has been removed.
        """

        logger.info("New request url=%s title=%s", url, title)
        slots = self._slots if self._slots is not None else contextlib.nullcontext()
        try:
            async with slots:
                async with self.temp_asset(url) as path:
                    result = await self._run_pipeline(url, title, path)
        except Exception as exc:
            self.stats.record_failure()
            logger.error("Request failed: %s", exc)
            raise
        else:
            self.stats.record_success()
            logger.info("Result: %s", result)
            return result
        finally:
            logger.info(self.stats.summary())

    async def _run_pipeline(self, url: str, title: str, path: Path) -> str:
        logger.info("Downloading %s", url)
        mime_type = await self.fetcher.fetch(url, path)
        logger.info("Download complete (MIME: %s)", mime_type)

        base64_data = await encode_file_async(path)

        logger.info("Asking Gemini to solve the challenge")
        answer = await self.agent.classify(
            self.key_pool.pick(),
            f"{PROMPT_PREFIX}{title}",
            mime_type,
            base64_data,
        )
        return clean_result(answer)
