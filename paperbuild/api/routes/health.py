"""
Health endpoint.

Serves the same JSON document the static build writes to
api/health.json, so deploy checks work against both.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from paperbuild.components.postfilter import ClockPort

# --- Startup Tracker ---


class StartupTracker:
    """Tracks application startup time for uptime calculation."""

    _start_time: float | None = None

    @classmethod
    def mark_started(cls) -> None:
        cls._start_time = time.monotonic()

    @classmethod
    def get_uptime_seconds(cls) -> float:
        if cls._start_time is None:
            return 0.0
        return time.monotonic() - cls._start_time

    @classmethod
    def reset(cls) -> None:
        cls._start_time = None


# --- Router Factory ---


def create_health_router(
    *,
    version: str,
    clock: ClockPort,
    is_development_mode: bool,
) -> APIRouter:
    """
    Create the health router.

    Args:
        version: Version string reported to callers
        clock: Source of the reported timestamp
        is_development_mode: Selects the reported environment name
    """
    router = APIRouter(tags=["Health"])

    @router.get("/api/health.json")
    def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": datetime.fromtimestamp(clock.now_ms() / 1000, UTC).isoformat(),
            "version": version,
            "environment": "development" if is_development_mode else "production",
            "uptime": round(StartupTracker.get_uptime_seconds(), 3),
        }

    return router
