"""FastAPI application entrypoint for the Gemini audio challenge service."""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .ai_agents.audio_challenge_agent import AudioChallengeAgent
from .config import Settings, get_settings
from .errors import ConfigurationError, InvalidRequestError
from .models.schemas import ErrorResponse
from .routers import audio
from .services.downloader import FileFetcher
from .services.key_pool import KeyPool
from .services.networking import get_lan_ip, get_public_ip
from .services.orchestration import AudioChallengeService

logger = logging.getLogger(__name__)

EXAMPLE_PAYLOAD = {
    "url": "https://example.com/audio.mp3",
    "title": "Audio captcha",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_service(settings: Settings) -> AudioChallengeService:
    """Wire the pipeline from settings; raises ConfigurationError without keys."""

    return AudioChallengeService(
        key_pool=KeyPool(settings.gemini_api_keys),
        temp_dir=settings.temp_dir,
        fetcher=FileFetcher(timeout=settings.download_timeout),
        agent=AudioChallengeAgent(model=settings.gemini_model),
        max_concurrent_requests=settings.max_concurrent_requests,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        service = build_service(settings)
        settings.temp_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Temp directory: %s", settings.temp_dir)
        application.state.audio_service = service
        yield

    application = FastAPI(
        title="Gemini Audio API",
        description="Downloads remote audio and asks Gemini to answer the audio challenge.",
        version="0.1.0",
        lifespan=lifespan,
    )

    @application.exception_handler(InvalidRequestError)
    async def invalid_request_handler(request: Request, exc: InvalidRequestError) -> JSONResponse:
        return JSONResponse(status_code=400, content=ErrorResponse(error=str(exc)).model_dump())

    @application.exception_handler(RequestValidationError)
    async def body_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error="Request body must be a JSON object with string `url` and `title` fields."
            ).model_dump(),
        )

    @application.get("/")
    async def root() -> dict[str, str]:
        """Lightweight health endpoint for service discovery."""
        return {"service": "gemini-audio", "status": "ok"}

    application.include_router(audio.router)
    return application


def log_banner(settings: Settings, lan_ip: Optional[str], public_ip: Optional[str]) -> None:
    separator = "=" * 50
    logger.info(separator)
    logger.info("Gemini Audio API is running")
    logger.info("Localhost: http://localhost:%d/audio", settings.port)
    if lan_ip:
        logger.info("LAN: http://%s:%d/audio", lan_ip, settings.port)
    if public_ip:
        logger.info("Public: http://%s:%d/audio", public_ip, settings.port)
    logger.info("Example JSON payload:\n%s", json.dumps(EXAMPLE_PAYLOAD, indent=2))
    logger.info(separator)


def run() -> None:
    """Console entry point: check configuration, print addresses, serve."""

    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    try:
        KeyPool(settings.gemini_api_keys)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    lan_ip = get_lan_ip()
    public_ip = asyncio.run(get_public_ip(settings.public_ip_url))
    log_banner(settings, lan_ip, public_ip)

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
