"""Logging for the result set cache.

Every module logs through ``structlog.get_logger(__name__)``, so all events
land under the ``schemacache`` stdlib logger. Nothing is emitted anywhere
until an application calls :func:`configure_logging`, which attaches one
handler per configured output to that logger and leaves the root logger
alone.

Events carry the inspection session id, either bound by the cache itself or
taken from the ambient context set with :func:`set_session_id`.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from schemacache.config.models import LoggingConfig, LogOutputConfig

LOGGER_NAME = "schemacache"

_session_id: ContextVar[str | None] = ContextVar("session_id", default=None)


def get_session_id() -> str | None:
    return _session_id.get()


def set_session_id(session_id: str | None = None) -> str:
    """Set or generate the ambient session id picked up by new caches."""
    sid = session_id or uuid4().hex[:12]
    _session_id.set(sid)
    return sid


def clear_session_id() -> None:
    _session_id.set(None)


def _add_session_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    # A cache's bound session_id wins over the ambient one
    if sid := get_session_id():
        event_dict.setdefault("session_id", sid)
    return event_dict


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        _add_session_id,  # type: ignore[list-item]
    ]


def _build_handler(output: LogOutputConfig, default_level: str) -> logging.Handler:
    handler: logging.Handler
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        handler = logging.FileHandler(output.destination, encoding="utf-8")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_pre_chain())
    )
    handler.setLevel(output.level or default_level)
    return handler


def configure_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Route cache events to the outputs in ``config``.

    Calling it again replaces the handlers installed by the previous call.
    Returns the ``schemacache`` stdlib logger.
    """
    from schemacache.config.models import LoggingConfig

    config = config or LoggingConfig()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            *_pre_chain(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    package_logger = logging.getLogger(LOGGER_NAME)
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()

    package_logger.setLevel(config.level)
    package_logger.propagate = False
    for output in config.outputs:
        package_logger.addHandler(_build_handler(output, config.level))
    return package_logger
