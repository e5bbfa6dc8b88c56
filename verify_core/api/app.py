"""
Application Factory
===================
FastAPI app wiring the container's lifecycle to startup and shutdown.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response

from verify_core import __version__
from verify_core.config import Settings, load_settings
from verify_core.container import VerifyContainer
from verify_core.logging_config import setup_logging
from verify_core.metrics import CONTENT_TYPE_LATEST, get_metrics_text

from .health import create_health_router
from .routes import create_otp_router


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[VerifyContainer] = None,
) -> FastAPI:
    """
    Build the verification API.

    Settings are loaded (and validated) here, before the app exists, so a
    missing secret stops the process at startup rather than on a request.

    Args:
        settings: Pre-loaded settings (defaults to ``load_settings()``)
        container: Pre-built container (defaults to production collaborators)
    """
    if container is None:
        settings = settings or load_settings()
        setup_logging(settings.service_name, settings.log_level, settings.log_json)
        container = VerifyContainer.from_settings(settings)
    else:
        settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await container.startup()
        try:
            yield
        finally:
            await container.shutdown()

    app = FastAPI(title=settings.service_name, version=__version__, lifespan=lifespan)
    app.state.container = container

    app.include_router(create_otp_router(container.issuance, container.verification))
    app.include_router(
        create_health_router(
            service_name=settings.service_name,
            version=__version__,
            counter_store_ping=container.counter_store.ping,
            record_store_ping=container.record_store.ping,
            sender_check=container.sender.health_check,
        )
    )

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(get_metrics_text(), media_type=CONTENT_TYPE_LATEST)

    return app
