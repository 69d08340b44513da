"""Gemini adapter that answers an audio challenge from inline audio data."""
from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Callable

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..errors import AIResponseError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"


def extract_text(response: Any) -> str:
    """Concatenate the text parts of the first candidate.

    Raises AIResponseError when there is no candidate or the joined text is empty.
    """

    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise AIResponseError("Gemini returned no candidates.")

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    text = "".join(getattr(part, "text", None) or "" for part in parts)
    if not text:
        raise AIResponseError("Gemini returned an empty result.")
    return text


class AudioChallengeAgent:
    """Sends a text prompt plus inline audio to Gemini, one attempt per call."""

    def __init__(
        self,
        *,
        model: str = DEFAULT_MODEL,
        client_factory: Callable[..., Any] = genai.Client,
    ) -> None:
        self.model = model
        self._client_factory = client_factory

    def build_contents(self, prompt_text: str, mime_type: str, base64_data: str) -> list[types.Part]:
        # The SDK takes raw bytes and handles the base64 wire encoding itself.
        return [
            types.Part(text=prompt_text),
            types.Part.from_bytes(data=base64.b64decode(base64_data), mime_type=mime_type),
        ]

    async def classify(self, credential: str, prompt_text: str, mime_type: str, base64_data: str) -> str:
        contents = self.build_contents(prompt_text, mime_type, base64_data)
        try:
            with self._client_factory(api_key=credential) as client:
                response = await asyncio.to_thread(
                    client.models.generate_content,
                    model=self.model,
                    contents=contents,
                )
        except genai_errors.APIError as exc:
            logger.error("Gemini call failed: %s", exc)
            raise AIResponseError(f"Gemini request failed: {exc}") from exc
        return extract_text(response)
