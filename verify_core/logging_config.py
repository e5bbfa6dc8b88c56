"""
Logging Setup
=============
Structured logging configuration shared by every verify-core module.

Usage:
    from verify_core.logging_config import setup_logging

    setup_logging(service_name="verify-core", level="INFO")
"""

import logging
import sys

import structlog


def setup_logging(
    service_name: str,
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """
    Configure stdlib logging and structlog for a service.

    Args:
        service_name: Name bound to every log event
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON (production) or console-friendly text
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service_name)

    structlog.get_logger(__name__).info(
        "Logging configured", service=service_name, level=level.upper()
    )


def mask_phone(phone: str) -> str:
    """Mask a phone number for logs, keeping the country prefix and last 2 digits."""
    if not phone or len(phone) <= 5:
        return "***"
    return f"{phone[:3]}{'*' * (len(phone) - 5)}{phone[-2:]}"
