import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from paperbuild import __version__
from paperbuild.adapters.clock import SystemClock
from paperbuild.api.deps import get_rules, get_settings
from paperbuild.api.routes import feeds
from paperbuild.api.routes.health import StartupTracker, create_health_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules on startup (fail-fast)
    try:
        rules = get_rules()
    except (FileNotFoundError, ValueError) as e:
        logger.critical(f"Rules load failed: {e}")
        raise
    logger.info(f"Rules loaded from {settings.rules_path} (timezone {rules.timezone})")

    StartupTracker.mark_started()
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="paperbuild preview",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(
        create_health_router(
            version=settings.version if settings.version != "local" else __version__,
            clock=SystemClock(),
            is_development_mode=settings.is_development_mode,
        )
    )
    app.include_router(feeds.router, tags=["Feeds"])
    return app


app = create_app()
