"""Structured logging setup.

structlog renders every event (ours, uvicorn's, and library loggers routed
through stdlib ``logging``) with the same processor chain. JSON is the default
output; ``LOG_FORMAT=console`` switches to the human-readable renderer.

    from xrs_names.core.logging import get_logger

    log = get_logger(__name__)
    log.info("name_registered", name="alice", address="Xrs...")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import structlog
from structlog.contextvars import merge_contextvars

from .config import LOG_FORMAT, LOG_LEVEL, SERVICE_NAME


def _processors(service_name: str) -> List[Any]:
    def _ensure_service(_: logging.Logger, __: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _ensure_service,
    ]


def setup_logging(
    *,
    service_name: str = SERVICE_NAME,
    level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """Configure structlog and stdlib logging. Call once at process start."""

    level = (level or LOG_LEVEL).upper()
    log_format = (log_format or LOG_FORMAT).lower()
    processors = _processors(service_name)

    if log_format == "console":
        renderer: Any = structlog.dev.ConsoleRenderer(colors=False, sort_keys=False)
    else:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=[structlog.stdlib.add_logger_name, *processors],
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False
        uvicorn_logger.setLevel(level)

    logging.getLogger("httpx").setLevel("WARNING")
    logging.getLogger("httpcore").setLevel("WARNING")


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, bound to ``name`` when given."""

    log = structlog.get_logger()
    if name:
        return log.bind(logger=name)
    return log


__all__ = ["get_logger", "setup_logging"]
