"""Base64 encoding of downloaded audio."""
from __future__ import annotations

import asyncio
import base64
import logging
from pathlib import Path

from ..errors import FileReadError

logger = logging.getLogger(__name__)


def encode_file(path: Path) -> str:
    """Read the whole file and return its base64 text."""

    logger.info("Reading file: %s", path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FileReadError(f"Could not read file: {exc}") from exc
    return base64.b64encode(data).decode("ascii")


async def encode_file_async(path: Path) -> str:
    return await asyncio.to_thread(encode_file, path)
