"""
Logging configuration for ts-doctest.

Provides structured JSON logging for CI runs and a human-readable format for
interactive use, with an optional rotating log file.
"""

import functools
import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone

from .config import Config


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "component": record.name,
            "run_id": self.run_id,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "metadata"):
            log_entry["metadata"] = record.metadata

        for attr in ["file_path", "dialect", "test_count", "duration", "status"]:
            if hasattr(record, attr):
                log_entry[attr] = getattr(record, attr)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter for interactive runs."""

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as human-readable text."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        message = f"[{timestamp}] {record.levelname:8} {record.name:28} | {record.getMessage()}"

        if hasattr(record, "metadata") and record.metadata:
            metadata_str = " | ".join(f"{k}={v}" for k, v in record.metadata.items())
            message += f" | {metadata_str}"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging(config: Config, run_id: str) -> logging.Logger:
    """
    Set up logging configuration based on environment and config.

    Log output goes to stderr so that stdout stays free for the paths printed
    in watch mode.

    Args:
        config: Configuration object with logging settings
        run_id: Identifier of this run for log correlation

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    log_level = getattr(logging, config.log_level)
    root_logger.setLevel(log_level)

    if config.log_format == "json":
        formatter = StructuredFormatter(run_id)
    else:
        formatter = TextFormatter(run_id)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            config.log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger("tsdoctest.logging")
    logger.debug(
        "Logging configured",
        extra={"metadata": {"run_id": run_id, **config.to_dict()}},
    )

    return root_logger


def get_logger(name: str, **context) -> logging.Logger:
    """
    Get a logger with optional context.

    Args:
        name: Logger name (typically module name)
        **context: Additional context to include in log records

    Returns:
        Configured logger with context
    """
    logger = logging.getLogger(name)

    if context:

        class ContextAdapter(logging.LoggerAdapter):
            def process(self, msg, kwargs):
                if "extra" not in kwargs:
                    kwargs["extra"] = {}
                kwargs["extra"].update(self.extra)
                return msg, kwargs

        return ContextAdapter(logger, context)

    return logger


def log_performance(operation_name: str):
    """
    Decorator to log how long a function took, and whether it failed.

    Failures are logged at debug level and re-raised.

    Args:
        operation_name: Name of the operation being measured

    Returns:
        Decorator function
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(f"{func.__module__}.{func.__name__}")
            start_time = time.perf_counter()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                # callers report the failure itself
                logger.debug(
                    f"{operation_name} failed",
                    extra={
                        "metadata": {
                            "operation": operation_name,
                            "duration": time.perf_counter() - start_time,
                            "success": False,
                            "error": str(e),
                        }
                    },
                )
                raise

            logger.debug(
                f"{operation_name} completed",
                extra={
                    "metadata": {
                        "operation": operation_name,
                        "duration": time.perf_counter() - start_time,
                        "success": True,
                    }
                },
            )
            return result

        return wrapper

    return decorator
