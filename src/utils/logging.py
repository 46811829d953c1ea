"""
Logging utilities for the motion graph compiler.

Provides structured logging with entry/exit decorators, JSON formatting,
correlation IDs, and consistent formatting across every compiler stage.

Features:
    - Structured JSON logging for build servers (LOG_FORMAT=json)
    - Correlation ID tracking across one compilation run
    - Entry/exit decorators with timing
    - Colorized console output for local runs

Example usage:
    >>> from src.utils.logging import get_logger, log_function_call, set_correlation_id
    >>>
    >>> logger = get_logger(__name__)
    >>> set_correlation_id("compile-variant-a")
    >>>
    >>> @log_function_call
    >>> def load_clips(manifest_path: str) -> int:
    >>>     logger.info("Loading clips", extra={"manifest": manifest_path})
    >>>     return 0
"""

import logging
import functools
import json
import os
import uuid
from typing import Any, Callable, TypeVar, cast, Optional, Dict
from datetime import datetime, timezone
from contextvars import ContextVar

import coloredlogs

# Type variable for generic decorator typing
F = TypeVar("F", bound=Callable[..., Any])

# Context variable for correlation ID
_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came in through `extra`
_STANDARD_RECORD_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "getMessage",
    ]
)


def _json_logging_enabled() -> bool:
    return os.getenv("LOG_FORMAT", "text").lower() == "json"


# ============================================================================
# Correlation ID Management
# ============================================================================

def get_correlation_id() -> str:
    """
    Get current correlation ID or generate new one.

    Returns:
        Current correlation ID (generates UUID if not set)
    """
    corr_id = _correlation_id.get()
    if corr_id is None:
        corr_id = str(uuid.uuid4())
        _correlation_id.set(corr_id)
    return corr_id


def set_correlation_id(corr_id: str) -> None:
    """
    Set correlation ID for current context.

    Args:
        corr_id: Correlation ID to set

    Example:
        >>> set_correlation_id("compile-variant-c")
        >>> # All subsequent logs will include this correlation ID
    """
    _correlation_id.set(corr_id)


def clear_correlation_id() -> None:
    """Clear correlation ID for current context."""
    _correlation_id.set(None)


# ============================================================================
# JSON Formatter
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Example output:
        {
            "timestamp": "2026-01-04T10:30:15.123456+00:00",
            "level": "WARNING",
            "logger": "src.patcher.overrides",
            "message": "Override patch for 'Variant D' is empty",
            "correlation_id": "compile-1234",
            "extra": {"variant": "Variant D"}
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON string.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": get_correlation_id(),
            "source": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        log_data["environment"] = {
            "hostname": os.getenv("HOSTNAME", "unknown"),
            "ci_job": os.getenv("CI_JOB_ID", ""),
        }

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", enable_colors: bool = True) -> None:
    """
    Configure global logging settings for the compiler.

    Sets up structured JSON logging when LOG_FORMAT=json, colorized text
    otherwise.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_colors: Whether to enable colorized console output (default: True)

    Example:
        >>> # Build server (JSON):
        >>> os.environ["LOG_FORMAT"] = "json"
        >>> setup_logging(level="INFO")
        >>>
        >>> # Local run (colorized text):
        >>> setup_logging(level="DEBUG", enable_colors=True)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)

    if _json_logging_enabled():
        console_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(console_handler)
    elif enable_colors:
        coloredlogs.install(
            level=log_level,
            fmt=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            logger=root_logger,
        )
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def log_function_call(func: F) -> F:
    """
    Decorator that logs function entry and exit with parameters and return values.

    - Logs function entry with all parameter values
    - Logs function exit with return value and execution time
    - Logs exceptions with full traceback, then re-raises
    - Includes correlation ID in all log entries

    Entry/exit records are emitted at DEBUG so that a compilation run over a
    large manifest does not flood the console at the default level.

    Args:
        func: Function to be decorated

    Returns:
        Wrapped function with logging

    Example:
        >>> @log_function_call
        >>> def filter_variant(entries, variant):
        >>>     ...
        >>>
        >>> # 2026-01-04 10:30:15 - module - DEBUG - ENTER filter_variant(...)
        >>> # 2026-01-04 10:30:15 - module - DEBUG - EXIT filter_variant -> ... (0.00s)
    """
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        correlation_id = get_correlation_id()

        arg_names = func.__code__.co_varnames[: func.__code__.co_argcount]
        args_repr = [f"{name}={_short_repr(value)}" for name, value in zip(arg_names, args)]
        kwargs_repr = [f"{key}={_short_repr(value)}" for key, value in kwargs.items()]
        all_args = ", ".join(args_repr + kwargs_repr)

        logger.debug(
            f"ENTER {func.__name__}",
            extra={
                "function": func.__name__,
                "arguments": all_args,
                "correlation_id": correlation_id,
                "event": "function_entry",
            },
        )

        start_time = datetime.now()

        try:
            result = func(*args, **kwargs)

            execution_time = (datetime.now() - start_time).total_seconds()
            logger.debug(
                f"EXIT {func.__name__} -> {_short_repr(result)} ({execution_time:.2f}s)",
                extra={
                    "function": func.__name__,
                    "duration_seconds": execution_time,
                    "correlation_id": correlation_id,
                    "event": "function_exit",
                    "status": "success",
                },
            )

            return result

        except Exception as error:
            execution_time = (datetime.now() - start_time).total_seconds()
            logger.error(
                f"ERROR {func.__name__} raised {type(error).__name__}: {str(error)}",
                extra={
                    "function": func.__name__,
                    "duration_seconds": execution_time,
                    "correlation_id": correlation_id,
                    "event": "function_error",
                    "status": "error",
                    "error_type": type(error).__name__,
                    "error_message": str(error),
                },
                exc_info=True,
            )

            # Re-raise exception to preserve original behavior
            raise

    return cast(F, wrapper)


def _short_repr(value: Any, limit: int = 120) -> str:
    """repr() clipped to `limit` characters (manifests can be large)."""
    text = repr(value)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text
