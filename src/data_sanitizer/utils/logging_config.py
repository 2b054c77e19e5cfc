"""Logging configuration for the data sanitizer."""

import logging
import sys
from pathlib import Path

# Default log file name
DEFAULT_LOG_FILE = "data_sanitizer.log"

# Maximum length of a field value echoed into log context
MAX_CONTEXT_VALUE_LENGTH = 80

# Log format with timestamp, level, module, and message
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _truncate_context(context: dict[str, object]) -> dict[str, object]:
    """Shorten long values in a context dict.

    Record values can be arbitrarily long user input, so they are
    clipped before being written to the log.

    Args:
        context: Dictionary of context values.

    Returns:
        Dictionary with long string values truncated.
    """
    truncated: dict[str, object] = {}
    for key, value in context.items():
        if isinstance(value, str) and len(value) > MAX_CONTEXT_VALUE_LENGTH:
            value = value[:MAX_CONTEXT_VALUE_LENGTH] + "..."
        truncated[key] = value
    return truncated


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    console_output: bool = True,
) -> logging.Logger:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file. If None, uses DEFAULT_LOG_FILE.
        console_output: Whether to also output to console.

    Returns:
        The root logger configured for the application.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("data_sanitizer")
    logger.setLevel(numeric_level)

    # Clear any existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_file is None:
        log_file = DEFAULT_LOG_FILE

    file_handler = logging.FileHandler(Path(log_file), encoding="utf-8")
    file_handler.setLevel(numeric_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (typically __name__).

    Returns:
        A logger instance for the module.
    """
    if name.startswith("data_sanitizer"):
        return logging.getLogger(name)
    return logging.getLogger(f"data_sanitizer.{name}")


class LogContext:
    """Context manager for logging operations with record context."""

    def __init__(self, logger: logging.Logger, operation: str, **context: object):
        """Initialize log context.

        Args:
            logger: Logger instance to use.
            operation: Name of the operation being performed.
            **context: Additional context to include in log messages.
        """
        self.logger = logger
        self.operation = operation
        self.context = context

    def __enter__(self) -> "LogContext":
        truncated = _truncate_context(self.context)
        context_str = ", ".join(f"{k}={v}" for k, v in truncated.items())
        self.logger.debug(f"Starting {self.operation}: {context_str}")
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> bool:
        if exc_type is not None:
            self.logger.error(
                f"Error in {self.operation}: {exc_type.__name__}: {exc_val}",
                exc_info=True,
            )
        else:
            self.logger.debug(f"Completed {self.operation}")
        return False  # Don't suppress exceptions
