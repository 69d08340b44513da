"""Streaming download of remote audio into a local temp file."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx

from ..errors import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "audio/mpeg"


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove partial download %s: %s", path, exc)


def _mime_type_from(response: httpx.Response) -> str:
    raw = response.headers.get("content-type", "")
    mime_type = raw.split(";", 1)[0].strip()
    return mime_type or DEFAULT_MIME_TYPE


class FileFetcher:
    """Downloads a URL to disk without buffering the payload in memory.

    Only 2xx responses are accepted. Whatever goes wrong, no partially written
    file is left behind.
    """

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, url: str, destination: Path) -> str:
        """Stream ``url`` into ``destination`` and return the response MIME type."""

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        logger.error("Download of %s failed with status %s", url, response.status_code)
                        raise DownloadError(
                            f"Could not download file from URL (status: {response.status_code})",
                            http_status=response.status_code,
                        )
                    mime_type = _mime_type_from(response)
                    destination.parent.mkdir(parents=True, exist_ok=True)
                    await self._write_body(response, destination)
                    return mime_type
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Request for %s failed: %s", url, exc)
            raise DownloadError(f"Could not download file from URL (status: N/A): {exc}") from exc

    async def _write_body(self, response: httpx.Response, destination: Path) -> None:
        try:
            with destination.open("wb") as fh:
                async for chunk in response.aiter_bytes():
                    await asyncio.to_thread(fh.write, chunk)
        except httpx.HTTPError as exc:
            _discard(destination)
            logger.error("Stream error while downloading to %s: %s", destination, exc)
            raise DownloadError(f"Error while downloading file from URL: {exc}") from exc
        except OSError as exc:
            _discard(destination)
            logger.error("Could not write %s: %s", destination, exc)
            raise DownloadError(f"Could not write downloaded file: {exc}") from exc
