"""Logging setup for lorereader.

All modules log through structlog with key/value events. While a list
session is navigating, every event also carries a ``navigation_id`` so the
fetch, parse and merge lines of one page turn can be grouped together.

Usage:
    from lorereader.core.logging import configure_logging, get_logger

    configure_logging("DEBUG", json_output=False)
    logger = get_logger(__name__)
    logger.info("Parsed list page", list_name="netdev", messages=200)
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import structlog

_navigation_id: ContextVar[str | None] = ContextVar("lorereader_navigation_id", default=None)


def set_navigation_id(navigation_id: str | None) -> None:
    """Tag subsequent events in this context; None removes the tag."""
    _navigation_id.set(navigation_id)


def get_navigation_id() -> str | None:
    return _navigation_id.get()


def add_navigation_id(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor adding the active navigation_id, if any."""
    navigation_id = _navigation_id.get()
    if navigation_id is not None:
        event_dict.setdefault("navigation_id", navigation_id)
    return event_dict


def _render_chain(json_output: bool) -> list[structlog.types.Processor]:
    if json_output:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Route structlog through stdlib logging on stderr.

    Safe to call more than once; the CLI calls it again after reading
    the config file.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR (any case)
        json_output: JSON lines when True, colored console lines otherwise
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_navigation_id,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_render_chain(json_output),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger bound to a module name, e.g. ``get_logger(__name__)``."""
    return structlog.get_logger(name)
