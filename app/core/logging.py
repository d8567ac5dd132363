"""structlog setup shared by the API and the importer CLI.

Two correlation ids can be attached to every event: ``request_id`` while an
HTTP request is being served and ``import_id`` while an import run is active.
"""

import logging
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any

import structlog

from app.core.config import get_settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
import_id_ctx: ContextVar[str | None] = ContextVar("import_id", default=None)

EventDict = MutableMapping[str, Any]


def context_var_processor(key: str, var: ContextVar[str | None]) -> structlog.types.Processor:
    """Build a processor copying ``var`` into the event under ``key`` when set."""

    def processor(
        _logger: structlog.types.WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        value = var.get()
        if value:
            event_dict[key] = value
        return event_dict

    processor.__name__ = f"add_{key}"
    return processor


add_request_id = context_var_processor("request_id", request_id_ctx)
add_import_id = context_var_processor("import_id", import_id_ctx)


def resolve_log_level() -> int:
    """Numeric level for LOG_LEVEL; production is raised to at least WARNING."""
    settings = get_settings()
    level: int = logging.getLevelNamesMapping()[settings.log_level]
    return max(level, logging.WARNING) if settings.is_production else level


def configure_logging() -> None:
    """Configure structlog from the current settings.

    LOG_FORMAT=json renders one JSON object per line; anything else uses the
    colored console renderer.
    """
    settings = get_settings()

    renderer: structlog.types.Processor
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_request_id,
            add_import_id,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger, usually called with ``__name__``."""
    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger
