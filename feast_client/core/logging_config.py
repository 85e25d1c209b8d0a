"""
Structlog setup for the client's log events.

Nothing is configured on import. ``configure_logging()`` installs one handler
on the ``feast_client`` logger and leaves the host application's root logger
alone unless asked for it.
"""
import json
import logging
from typing import Any, List, Optional

import structlog
from structlog.stdlib import ProcessorFormatter


LOGGER_NAME = "feast_client"

_PRE_CHAIN: List[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
]

_handler: Optional[logging.Handler] = None


def _dumps(obj, default=None, **kwargs):
    return json.dumps(obj, ensure_ascii=False, default=default, **kwargs)


def get_renderer(debug: bool) -> Any:
    """Console renderer in debug, JSON otherwise."""
    if debug:
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer(serializer=_dumps)


def configure_logging(debug: Optional[bool] = None, logger_name: str = LOGGER_NAME) -> logging.Handler:
    """Route structlog events through stdlib logging under ``logger_name``.

    Calling again replaces the handler installed by the previous call. Pass
    ``logger_name=""`` to configure the root logger instead.
    """
    global _handler

    if debug is None:
        from feast_client.core.config import get_settings

        debug = get_settings().debug

    structlog.configure(
        processors=[*_PRE_CHAIN, ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[ProcessorFormatter.remove_processors_meta, get_renderer(debug)],
        )
    )

    target = logging.getLogger(logger_name)
    if _handler is not None:
        for logger in (target, logging.getLogger(LOGGER_NAME), logging.getLogger()):
            logger.removeHandler(_handler)
    _handler = handler
    target.addHandler(handler)
    target.setLevel(logging.DEBUG if debug else logging.INFO)
    if logger_name:
        target.propagate = False
    return handler


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
