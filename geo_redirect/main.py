"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from dotenv import load_dotenv
from fastapi import FastAPI

from geo_redirect.adapters.inbound.http.admin_routes import router as admin_router
from geo_redirect.adapters.inbound.http.routes import SERVICE_VERSION, router
from geo_redirect.infrastructure.config.settings import Settings, ensure_valid_startup_settings
from geo_redirect.infrastructure.logging.logger import configure_logging, log_event
from geo_redirect.infrastructure.wiring.container import Container

# Load environment variables from .env file
load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Validate settings, connect storage, and release resources on shutdown."""
    container: Container = app.state.container
    ensure_valid_startup_settings(container.settings)
    if not container.settings.ipinfo_token:
        log_event(
            "startup",
            "ipinfo_token_missing",
            level=logging.WARNING,
            message="ipinfo provider and self-lookup disabled",
        )

    await container.startup()
    log_event(
        "startup",
        "service_started",
        version=SERVICE_VERSION,
        environment=container.settings.environment,
        has_redis_url=bool(container.settings.redis_url),
    )
    try:
        yield
    finally:
        await container.close()
        log_event("startup", "service_stopped")


def create_app(settings: Optional[Settings] = None, container: Optional[Container] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (defaults to environment settings)
        container: Prebuilt composition root (defaults to one built from settings)

    Returns:
        Configured FastAPI app
    """
    settings = settings or (container.settings if container else Settings())
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Geo Redirect",
        description="Geo-aware redirect service with runtime-configurable destinations",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.container = container or Container(settings)

    app.include_router(admin_router)
    app.include_router(router)
    return app


app = create_app()
