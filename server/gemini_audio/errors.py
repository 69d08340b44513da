"""Exception types raised along the audio challenge pipeline."""
from __future__ import annotations

from typing import Optional


class AudioGatewayError(Exception):
    """Base class for errors the service reports to clients."""

    status_code: int = 500


class InvalidRequestError(AudioGatewayError):
    """Missing or malformed request fields."""

    status_code = 400


class ConfigurationError(AudioGatewayError):
    """The service cannot start with the current configuration."""


class DownloadError(AudioGatewayError):
    """The remote audio file could not be fetched."""

    def __init__(self, message: str, *, http_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.http_status = http_status


class FileReadError(AudioGatewayError, OSError):
    """A local temp file could not be read."""


class AIResponseError(AudioGatewayError):
    """Gemini gave no usable answer."""
