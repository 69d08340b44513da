"""Audio challenge endpoint."""
from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..errors import AudioGatewayError, InvalidRequestError
from ..models import schemas
from ..services.orchestration import AudioChallengeService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["audio"])

# Code points a WHATWG host may not contain; ':' is left to the IPv6 parser.
_FORBIDDEN_HOST_CHARS = set(" \t\n\r#%/<>?@[\\]^|")


def is_absolute_url(value: str) -> bool:
    """True when ``value`` has a scheme, a well-formed host and a valid port."""

    try:
        parsed = urlparse(value)
        parsed.port  # raises ValueError when out of range or non-numeric
        url = httpx.URL(value)
    except (ValueError, httpx.InvalidURL):
        return False
    host = parsed.hostname or ""
    if not parsed.scheme or not url.host or not host:
        return False
    return not _FORBIDDEN_HOST_CHARS.intersection(host)


def validate_request(payload: schemas.AudioChallengeRequest) -> tuple[str, str]:
    """Return ``(url, title)`` or raise InvalidRequestError."""

    if not payload.url or not payload.title:
        raise InvalidRequestError("Missing `url` or `title` in request body.")
    if not is_absolute_url(payload.url):
        raise InvalidRequestError("Invalid URL.")
    return payload.url, payload.title


@router.post(
    "/audio",
    response_model=schemas.AudioChallengeResponse,
    responses={400: {"model": schemas.ErrorResponse}, 500: {"model": schemas.ErrorResponse}},
)
async def solve_audio_challenge(payload: schemas.AudioChallengeRequest, request: Request):
    """Download the audio at ``url`` and return Gemini's answer for ``title``."""

    url, title = validate_request(payload)
    service: AudioChallengeService = request.app.state.audio_service
    try:
        result = await service.solve(url, title)
    except Exception as exc:
        if not isinstance(exc, AudioGatewayError):
            logger.exception("Unexpected error while solving %s", url)
        return JSONResponse(
            status_code=500,
            content=schemas.ErrorResponse(error=str(exc) or type(exc).__name__).model_dump(),
        )
    return schemas.AudioChallengeResponse(result=result)
