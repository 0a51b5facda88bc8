"""Process bootstrap.

Host applications call bootstrap() once at startup: it configures logging,
publishes build info and optionally exposes Prometheus metrics over HTTP.
"""

from __future__ import annotations

from prometheus_client import start_http_server

from app.config import Settings, get_settings
from app.logging_config import get_logger, setup_logging
from app.metrics import APP_INFO

logger = get_logger(__name__)


def bootstrap(settings: Settings | None = None) -> Settings:
    """Initialize logging and metrics for the current process."""
    settings = settings or get_settings()

    setup_logging()
    APP_INFO.info(
        {
            "version": settings.app_version,
            "environment": settings.environment.value,
        }
    )

    if settings.metrics_enabled and settings.metrics_port:
        start_http_server(settings.metrics_port)
        logger.info("metrics_server_started", port=settings.metrics_port)

    logger.info(
        "skill_scope_ready",
        version=settings.app_version,
        environment=settings.environment.value,
        live_templates=settings.live_templates_enabled,
    )
    return settings
