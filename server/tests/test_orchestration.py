from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from gemini_audio.errors import ConfigurationError, DownloadError
from gemini_audio.main import build_service
from gemini_audio.services.key_pool import KeyPool
from gemini_audio.services.orchestration import AudioChallengeService, clean_result, temp_filename_for

from conftest import FakeAgent


def _run(coro):  # noqa: ANN001
    return asyncio.run(coro)


class SlowFetcher:
    def __init__(self) -> None:
        self.active = 0
        self.peak = 0

    async def fetch(self, url: str, destination: Path) -> str:
        self.active += 1
        self.peak = max(self.peak, self.active)
        await asyncio.sleep(0.01)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(b"RIFF")
        self.active -= 1
        return "audio/wav"


class FailingFetcher:
    def __init__(self) -> None:
        self.paths: list[Path] = []

    async def fetch(self, url: str, destination: Path) -> str:
        self.paths.append(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(b"partial")
        raise DownloadError("Could not download file from URL (status: 503)", http_status=503)


def _service(tmp_path: Path, **kwargs) -> AudioChallengeService:  # noqa: ANN003
    return AudioChallengeService(key_pool=KeyPool(["k1", "k2"]), temp_dir=tmp_path, **kwargs)


def test_clean_result_strips_newlines_and_whitespace() -> None:
    assert clean_result("7 3 9\n") == "7 3 9"
    assert clean_result("\n  a\nb  \n") == "ab"
    assert clean_result(clean_result(" x\n")) == "x"


def test_temp_filenames_are_unique_and_keep_extension() -> None:
    first = temp_filename_for("https://example.com/audio/clip.wav?token=1")
    second = temp_filename_for("https://example.com/audio/clip.wav?token=1")
    assert first != second
    assert first.endswith(".wav")
    assert temp_filename_for("https://example.com/").endswith(".mp3")


def test_failure_removes_file_created_before_error(tmp_path: Path) -> None:
    fetcher = FailingFetcher()
    service = _service(tmp_path, fetcher=fetcher, agent=FakeAgent())

    with pytest.raises(DownloadError):
        _run(service.solve("https://example.com/a.mp3", "t"))

    assert not fetcher.paths[0].exists()
    assert service.stats.failed == 1
    assert service.stats.summary() == "Success: 0 | Failed: 1"


def test_concurrent_requests_are_unbounded_by_default(tmp_path: Path) -> None:
    fetcher = SlowFetcher()
    service = _service(tmp_path, fetcher=fetcher, agent=FakeAgent("ok"))

    async def scenario() -> list[str]:
        return await asyncio.gather(
            *(service.solve(f"https://example.com/{i}.wav", "t") for i in range(4))
        )

    assert _run(scenario()) == ["ok"] * 4
    assert fetcher.peak == 4
    assert service.stats.success == 4
    assert list(tmp_path.iterdir()) == []


def test_max_concurrent_requests_caps_in_flight_pipelines(tmp_path: Path) -> None:
    fetcher = SlowFetcher()
    service = _service(tmp_path, fetcher=fetcher, agent=FakeAgent("ok"), max_concurrent_requests=2)

    async def scenario() -> list[str]:
        return await asyncio.gather(
            *(service.solve(f"https://example.com/{i}.wav", "t") for i in range(5))
        )

    assert _run(scenario()) == ["ok"] * 5
    assert fetcher.peak == 2


def test_build_service_requires_api_keys(settings) -> None:
    settings.gemini_api_keys = []
    with pytest.raises(ConfigurationError):
        build_service(settings)
