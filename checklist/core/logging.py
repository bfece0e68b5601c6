"""Logfire setup and span helpers for the checklist service.

Service functions open a span named "<module>.<function>", so a request to
/checklist/statistics shows compliance_service.get_compliance_stats with the
active-assignment query nested under it. Log records go through ``logging``
loggers named after their module; Logfire only ships them when a token is
configured, otherwise they stay on the local handlers.

The exception handlers in main tag each rejected request with its route name::

    log_with_context(logger, "info", "request_rejected", tag="checklist_complete_post", error_type="ForbiddenError")
"""

import logging

import logfire
from fastapi import FastAPI

from checklist.core.config import settings


def configure_logfire() -> None:
    """Point Logfire at the configured environment; nothing is sent without a token."""
    logfire.configure(
        token=settings.logfire_token,
        service_name="checklist",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def instrument_fastapi(app: FastAPI) -> None:
    """Record a span per HTTP request on the checklist app."""
    logfire.instrument_fastapi(app)
    logger = logging.getLogger(__name__)
    logger.info("FastAPI instrumentation configured")


def span(name: str) -> logfire.LogfireSpan:
    """Open the span wrapping one service call, e.g. ``span("compliance_service.get_team_report")``."""
    return logfire.span(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log ``message`` at ``level`` with the context fields attached as record extras.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Extras such as the route tag or the acting employee ID
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)
