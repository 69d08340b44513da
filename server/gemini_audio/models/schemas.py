"""Pydantic models describing request and response payloads."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class AudioChallengeRequest(BaseModel):
    """Incoming payload for ``POST /audio``.

    Fields are optional at the schema level so that missing values are reported
    with the service's own 400 body rather than a framework error.
    """

    url: Optional[str] = Field(default=None, description="Absolute URL of the audio file")
    title: Optional[str] = Field(default=None, description="Label of the challenge, added to the prompt")


class AudioChallengeResponse(BaseModel):
    """Successful answer."""

    status: bool = True
    result: str = Field(..., description="Model answer without newlines or surrounding whitespace")


class ErrorResponse(BaseModel):
    """Uniform failure body for 400 and 500 responses."""

    status: bool = False
    error: str
