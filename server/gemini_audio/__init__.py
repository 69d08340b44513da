"""Gemini audio challenge service.

Importing the package populates ``os.environ`` from ``server/.env`` and then
``server/.env.local``; later files win, so API keys can stay out of the shared one.
"""
from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv


ENV_FILES = (".env", ".env.local")


def load_env_files(base_dir: Path) -> None:
    for index, name in enumerate(ENV_FILES):
        load_dotenv(base_dir / name, override=index > 0)


load_env_files(Path(__file__).resolve().parent.parent)
