"""
Structured logging with structlog.

Development renders colored console lines; staging and production emit one
JSON object per line. Request-scoped values bound through
``structlog.contextvars`` (the request id) are merged into every event.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from facturacion.config.settings import Settings, get_settings

# Event keys whose values must never reach the logs
SENSITIVE_KEYS = frozenset({"authorization", "token", "password", "jwt_secret"})

QUIET_LOGGERS = ("aiosqlite", "multipart", "python_multipart", "uvicorn.access")


def add_service_info(settings: Settings) -> Processor:
    """Processor stamping the service name, version and environment."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", settings.app_name)
        event_dict.setdefault("version", settings.app_version)
        event_dict.setdefault("environment", settings.environment)
        return event_dict

    return processor


def redact_sensitive(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credentials passed as event values."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger it writes through."""
    settings = settings or get_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_info(settings),
        redact_sensitive,
    ]
    if settings.environment == "development":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    else:
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
