"""Custom structlog processors for filehandles logging"""

from structlog.types import EventDict, WrappedLogger


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add library-level context to logs"""
    from filehandles.core.config import settings
    event_dict["service"] = settings.app_name
    event_dict["environment"] = settings.environment

    import os
    event_dict["pid"] = os.getpid()

    return event_dict


def add_caller_info(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add caller location information for debugging"""
    from filehandles.core.config import settings
    if not settings.is_development:
        return event_dict

    import inspect

    # Get the frame of the actual caller (skip structlog and logging frames)
    frame = None
    for record in inspect.stack()[1:]:
        module = inspect.getmodule(record.frame)
        if module and not module.__name__.startswith(("structlog", "logging", "filehandles.infrastructure")):
            frame = record
            break

    if frame:
        event_dict["caller"] = {
            "filename": frame.filename.split("/")[-1],
            "function": frame.function,
            "lineno": frame.lineno
        }

    return event_dict


def format_exception_info(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Format exception information for better readability"""
    import sys
    import traceback

    exc_info = event_dict.pop("exc_info", None)
    if exc_info:
        if isinstance(exc_info, tuple):
            exc_type, exc_value, exc_tb = exc_info
        elif isinstance(exc_info, BaseException):
            exc_type, exc_value, exc_tb = type(exc_info), exc_info, exc_info.__traceback__
        else:
            exc_type, exc_value, exc_tb = sys.exc_info()

        if exc_type:
            event_dict["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb)
            }

    return event_dict


def set_log_severity(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Set proper severity field for log aggregation systems"""
    level_map = {
        "debug": "DEBUG",
        "info": "INFO",
        "warning": "WARNING",
        "error": "ERROR",
        "critical": "CRITICAL"
    }

    if "level" in event_dict:
        event_dict["severity"] = level_map.get(event_dict["level"], "INFO")

    return event_dict
