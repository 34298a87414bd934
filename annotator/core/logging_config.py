"""
Logging configuration for the annotation service.

- structlog for structured events (JSON in production, console in debug)
- python-json-logger for stdlib records that bypass structlog (uvicorn etc.)
- INFO/DEBUG go to stdout, ERROR/CRITICAL to stderr
- every record carries the request trace ID set by RequestLoggingMiddleware
"""

import logging
import logging.config
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog
from structlog.types import EventDict
from pythonjsonlogger.json import JsonFormatter


# Per-request trace ID; a ContextVar keeps concurrent requests apart
_trace_id_context: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def set_trace_id(trace_id: str) -> None:
    """Set the trace ID for the current request context.

    Called by middleware to inject request tracking ID.
    """
    _trace_id_context.set(trace_id)


def get_trace_id() -> Optional[str]:
    """Get the current trace ID.

    Returns:
        Trace ID if set, None otherwise
    """
    return _trace_id_context.get()


def clear_trace_id() -> None:
    """Clear the trace ID after request completes."""
    _trace_id_context.set(None)


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add service name, version, environment and trace ID to every event."""
    from annotator.core.config import settings

    event_dict["service"] = settings.SERVICE_NAME
    event_dict["version"] = settings.VERSION
    event_dict["environment"] = settings.ENVIRONMENT

    trace_id = get_trace_id()
    if trace_id:
        event_dict["trace_id"] = trace_id

    return event_dict


def configure_structlog(debug: bool = False, json_logs: bool = True) -> None:
    """Configure structlog for structured logging.

    Args:
        debug: Enable debug mode with pretty console output
        json_logs: Use JSON formatting (True) or console (False)
    """
    shared_processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    if debug and not json_logs:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter that keeps level, logger and trace_id fields consistent."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get('timestamp'):
            log_record['timestamp'] = self.formatTime(record, self.datefmt)

        log_record['level'] = (log_record.get('level') or record.levelname).upper()
        log_record['logger'] = record.name

        trace_id = get_trace_id()
        if trace_id and 'trace_id' not in log_record:
            log_record['trace_id'] = trace_id


class InfoAndBelowFilter(logging.Filter):
    """Only lets INFO and DEBUG through, so stdout and stderr never overlap."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= logging.INFO


def get_logging_config(debug: bool = False, json_logs: bool = True) -> Dict[str, Any]:
    """Generate logging dictConfig.

    Args:
        debug: Enable debug mode
        json_logs: Use JSON formatting

    Returns:
        Dictionary configuration for logging.config.dictConfig
    """
    from annotator.core.config import settings

    log_level = settings.LOG_LEVEL.upper()

    if debug and not json_logs:
        formatter = {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}
    else:
        formatter = {
            "()": "annotator.core.logging_config.CustomJsonFormatter",
            "format": "%(timestamp)s %(level)s %(name)s %(message)s",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": formatter,
        },
        "filters": {
            "info_and_below": {
                "()": "annotator.core.logging_config.InfoAndBelowFilter",
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "level": "DEBUG",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["info_and_below"],
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "level": "ERROR",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "": {
                "handlers": ["stdout", "stderr"],
                "level": log_level,
                "propagate": False,
            },
            "annotator": {
                "handlers": ["stdout", "stderr"],
                "level": log_level,
                "propagate": False,
            },
            "uvicorn": {
                "handlers": ["stdout", "stderr"],
                "level": "INFO",
                "propagate": False,
            },
            # Access logs come from RequestLoggingMiddleware instead
            "uvicorn.access": {
                "handlers": [],
                "level": "CRITICAL",
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": ["stderr"],
                "level": "INFO",
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "handlers": ["stdout", "stderr"],
                "level": "WARNING",
                "propagate": False,
            },
            "aiosqlite": {
                "handlers": ["stdout", "stderr"],
                "level": "WARNING",
                "propagate": False,
            },
            "passlib": {
                "handlers": ["stdout", "stderr"],
                "level": "ERROR",
                "propagate": False,
            },
        },
    }


def setup_logging(debug: bool = False, json_logs: bool = True) -> None:
    """Initialize the complete logging system.

    Call this once at application startup.

    Example:
        >>> from annotator.core.config import settings
        >>> setup_logging(debug=settings.is_debug_mode, json_logs=settings.use_json_logs)
    """
    logging.config.dictConfig(get_logging_config(debug=debug, json_logs=json_logs))
    configure_structlog(debug=debug, json_logs=json_logs)

    get_logger(__name__).info(
        "logging_system_initialized",
        debug_mode=debug,
        json_logs=json_logs,
        log_level=logging.getLevelName(logging.root.level),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("user_registered", user_id="u-1", role="admin")
    """
    return structlog.get_logger(name)
