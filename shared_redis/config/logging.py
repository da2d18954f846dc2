"""
Structured logging configuration using structlog.

Events from this library's loggers are tagged with the library name and the
subpackage that emitted them, so host services can filter on them.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor

if TYPE_CHECKING:
    from shared_redis.config.settings import Settings

LIBRARY_LOGGER = "shared_redis"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Tag events emitted by shared_redis loggers.

    Requires add_logger_name to have run; events from other loggers pass
    through untouched.

    Args:
        logger: Logger instance
        method_name: Method name
        event_dict: Event dictionary

    Returns:
        Updated event dictionary
    """
    name = event_dict.get("logger") or ""
    if name != LIBRARY_LOGGER and not name.startswith(f"{LIBRARY_LOGGER}."):
        return event_dict

    event_dict["app"] = LIBRARY_LOGGER
    parts = name.split(".")
    if len(parts) > 1:
        # cache / messaging / config
        event_dict["component"] = parts[1]
    return event_dict


def service_name_adder(service_name: str) -> Processor:
    """Build a processor that stamps the embedding service's name on every event."""

    def add_service_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service_name


def _renderers(json_logs: bool) -> list[Processor]:
    if json_logs:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.processors.ExceptionPrettyPrinter(),
        structlog.dev.ConsoleRenderer(colors=True),
    ]


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: str | None = None,
) -> None:
    """
    Setup structured logging with structlog.

    The level is also set on the shared_redis logger itself, so it applies
    when the host application has already configured the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Whether to output logs as JSON (True) or console-friendly format (False)
        service_name: Name of the service embedding the library, added to every event
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)
    logging.getLogger(LIBRARY_LOGGER).setLevel(numeric_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]
    if service_name:
        processors.append(service_name_adder(service_name))

    structlog.configure(
        processors=processors + _renderers(json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


def configure_logging(settings: "Settings | None" = None) -> None:
    """
    Setup logging from application settings.

    Args:
        settings: Application settings (defaults to environment-loaded settings)
    """
    from shared_redis.config.settings import get_settings

    settings = settings or get_settings()
    setup_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        service_name=settings.service_name,
    )
