"""Configuration helpers for the audio challenge service."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


_SERVER_DIR = Path(__file__).resolve().parent.parent

API_KEY_PREFIX = "GEMINI_API_KEY_"


def load_api_keys(environ: dict[str, str] | None = None) -> list[str]:
    """Collect GEMINI_API_KEY_1, GEMINI_API_KEY_2, ... until the first gap."""

    env = os.environ if environ is None else environ
    keys: list[str] = []
    index = 1
    while env.get(f"{API_KEY_PREFIX}{index}"):
        keys.append(env[f"{API_KEY_PREFIX}{index}"])
        index += 1
    return keys


@dataclass
class Settings:
    """Centralized environment-driven configuration.

    Values are read once when the module is imported; tests build their own
    instances instead of touching the environment.
    """

    gemini_api_keys: list[str] = field(default_factory=load_api_keys)
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    temp_dir: Path = Path(os.getenv("TEMP_AUDIO_DIR", str(_SERVER_DIR / "temp_audio")))
    download_timeout: float = float(os.getenv("DOWNLOAD_TIMEOUT", "10"))
    public_ip_url: str = os.getenv("PUBLIC_IP_URL", "https://icanhazip.com")
    # 0 disables the cap on in-flight requests
    max_concurrent_requests: int = int(os.getenv("MAX_CONCURRENT_REQUESTS", "0"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance to avoid repeated environment reads."""

    return Settings()


settings = get_settings()
