"""
Structured logging setup.

DESIGN DECISION: Logging happens around the engine, never inside it.
Store mutations, imports/exports, access-gate failures and recomputations
are logged as structured JSON events; the aggregation functions stay pure.
"""

import logging
import sys
from typing import Optional

import structlog

from src.config import AppSettings, get_settings


_configured = False


def resolve_log_level(app_settings: AppSettings) -> str:
    """Debug mode always logs at DEBUG; otherwise the configured log_level."""
    if app_settings.debug_mode:
        return "DEBUG"
    return app_settings.log_level


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog on top of the standard library logger.

    Safe to call more than once; only the first call has an effect.

    Args:
        level: Minimum log level. Defaults to DEBUG in debug mode, else
            the configured log_level.
    """
    global _configured
    if _configured:
        return

    level = level or resolve_log_level(get_settings().app)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(ensure_ascii=False)
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, configuring logging on first use."""
    configure_logging()
    return structlog.get_logger(name)
