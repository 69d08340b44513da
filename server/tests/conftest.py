from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from gemini_audio.config import Settings
from gemini_audio.main import create_app


class FakeFetcher:
    """Writes fixed bytes to the destination instead of downloading."""

    def __init__(self, payload: bytes = b"ID3\x03fake-mp3", mime_type: str = "audio/mpeg"):
        self.payload = payload
        self.mime_type = mime_type
        self.paths: list[Path] = []

    async def fetch(self, url: str, destination: Path) -> str:
        self.paths.append(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.payload)
        return self.mime_type


class FakeAgent:
    def __init__(self, answer: str | Exception = "7 3 9\n"):
        self.answer = answer
        self.calls: list[tuple[str, str, str, str]] = []

    async def classify(self, credential: str, prompt_text: str, mime_type: str, base64_data: str) -> str:
        self.calls.append((credential, prompt_text, mime_type, base64_data))
        if isinstance(self.answer, Exception):
            raise self.answer
        return self.answer


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        gemini_api_keys=["test-key-0123456789"],
        temp_dir=tmp_path / "temp_audio",
        download_timeout=1.0,
        max_concurrent_requests=0,
    )


@pytest.fixture
def client(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def service(client: TestClient):
    return client.app.state.audio_service
