# backend/schedule_engine/main.py
"""
FastAPI application for the community availability engine.

Mounts the versioned availability router, the unified error envelope and a
Prometheus exposition endpoint.
"""

import logging

from fastapi import APIRouter, Depends, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings, get_settings, settings
from .core.constants import ALLOWED_ORIGINS, API_DESCRIPTION, API_TITLE, API_VERSION
from .errors import register_error_handlers
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes.v1 import availability as availability_v1
from .schemas.main_responses import HealthResponse


def configure_logging(level: str = settings.log_level) -> None:
    """Apply the configured root log level with the standard line format."""
    logging.basicConfig(
        level=logging.getLevelNamesMapping()[level],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


configure_logging()

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "OPTIONS", "POST"],
        allow_headers=["*"],
    )
    logger.info("CORS allow_origins=%s", ALLOWED_ORIGINS)

    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(availability_v1.router, prefix="/availability")
    app.include_router(api_v1)

    @app.get("/health", response_model=HealthResponse, include_in_schema=False)
    def health_check(config: Settings = Depends(get_settings)) -> HealthResponse:
        return availability_v1.health_payload(config)

    @app.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        return Response(
            content=prometheus_metrics.get_metrics(),
            media_type=prometheus_metrics.get_content_type(),
        )

    logger.info(
        f"{API_TITLE} v{API_VERSION} ready (environment={settings.environment}, "
        f"timezone={settings.timezone})"
    )
    return app


app = create_app()
