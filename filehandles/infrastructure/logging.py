import logging
import sys
from typing import Any, Optional
import structlog
from structlog.types import Processor

from filehandles.core.config import settings
from filehandles.infrastructure.logging_processors import (
    add_service_context,
    add_caller_info,
    format_exception_info,
    set_log_severity,
)


def setup_logging() -> None:
    timestamper = structlog.processors.TimeStamper(fmt="iso")

    # Build processor chain
    shared_processors: list[Processor] = [
        # Add contextvars (unit, path, etc.)
        structlog.contextvars.merge_contextvars,

        # Add custom context
        add_service_context,

        # Add log level
        structlog.processors.add_log_level,
        set_log_severity,

        # Add caller info in development
        add_caller_info if settings.is_development else lambda *args: args[-1],

        # Format exceptions
        format_exception_info,

        # Add timestamp
        timestamper,
    ]

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.rich_traceback
        )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.log_level))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


class EmitsLogs:
    """Optional pluggable logger shared by files and handles.

    Nothing is emitted while no logger is set.
    """

    _logger: Optional[Any] = None

    def set_logger(self, logger: Optional[Any]) -> None:
        self._logger = logger

    def get_logger(self) -> Optional[Any]:
        return self._logger

    def _unit(self, operation: str) -> str:
        return f"{type(self).__name__}.{operation}"

    def _log(self, level: str, event: str, operation: str, **kwargs: Any) -> None:
        if self._logger is None:
            return
        getattr(self._logger, level)(event, unit=self._unit(operation), **kwargs)

    def _debug(self, event: str, operation: str, **kwargs: Any) -> None:
        self._log("debug", event, operation, **kwargs)

    def _info(self, event: str, operation: str, **kwargs: Any) -> None:
        self._log("info", event, operation, **kwargs)

    def _warning(self, event: str, operation: str, **kwargs: Any) -> None:
        self._log("warning", event, operation, **kwargs)
