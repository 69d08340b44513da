"""Process-wide request counters."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RequestStats:
    """Success/failure tallies shown in the request log."""

    success: int = 0
    failed: int = 0

    def record_success(self) -> None:
        self.success += 1

    def record_failure(self) -> None:
        self.failed += 1

    def summary(self) -> str:
        return f"Success: {self.success} | Failed: {self.failed}"
