"""Random selection across the configured Gemini API keys."""
from __future__ import annotations

import logging
import random
from typing import Sequence

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


class KeyPool:
    """Immutable set of credentials; every pick is an independent uniform draw."""

    def __init__(self, keys: Sequence[str]) -> None:
        cleaned = tuple(key for key in keys if key)
        if not cleaned:
            raise ConfigurationError(
                "No Gemini API keys configured; set at least GEMINI_API_KEY_1"
            )
        self._keys = cleaned

    def __len__(self) -> int:
        return len(self._keys)

    def pick(self) -> str:
        key = random.choice(self._keys)
        logger.info("Using API key: %s...", key[:10])
        return key
