"""
Logging configuration and error hierarchy for the converter toolkit.

This module provides:
- Structured logging setup with console and file handlers
- Custom exception hierarchy for different error types
- Error categorization (user vs technical errors)
- Rendering of errors into parenthesized diagnostic strings
"""

import logging
import sys
from typing import Any, Dict, Optional

DIAGNOSTIC_MAX_LENGTH = 200


class ConverterError(Exception):
    """Base error for all converter operations."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message} (Suggestion: {self.suggestion})"
        return self.message

    def diagnostic(self) -> str:
        """Render the error the way converters report bad input."""
        message = self.message.strip().splitlines()[0] if self.message.strip() else ""
        if not message:
            return "(conversion error)"
        return f"({message[:DIAGNOSTIC_MAX_LENGTH]})"


class UserError(ConverterError):
    """Error caused by user input/action."""

    pass


class SystemError(ConverterError):
    """Error caused by system/environment issues."""

    def __init__(
        self,
        message: str,
        technical_details: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        self.technical_details = technical_details
        super().__init__(message, suggestion)


class ConversionError(ConverterError):
    """Error during conversion process."""

    pass


class DependencyError(SystemError):
    """Error when a required library, binary or platform primitive is missing."""

    pass


class InvalidInputError(UserError):
    """Error when user input is invalid."""

    pass


class UnitNotFoundError(UserError):
    """Error when no converter is registered under the requested id."""

    pass


class FormatNotSupportedError(UserError):
    """Error when a format pair has no conversion."""

    pass


def setup_logging(
    level: int | str = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging configuration for the toolkit.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to log file
        format_string: Optional custom format string

    Returns:
        Configured logger instance
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("convert_everything")
    logger.setLevel(level)
    logger.handlers.clear()

    fmt = format_string or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt, datefmt=datefmt)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (e.g., 'dispatcher', 'converters.image')

    Returns:
        Logger instance for the module
    """
    return logging.getLogger(f"convert_everything.{name}")


def log_conversion_error(
    logger: logging.Logger,
    error: BaseException,
    unit_id: Optional[str] = None,
    include_traceback: bool = True,
) -> None:
    """Log an error caught at the dispatch boundary.

    User errors are logged at WARNING, anything else at ERROR. The
    traceback goes to DEBUG.
    """
    prefix = f"[{unit_id}] " if unit_id else ""
    if isinstance(error, ConverterError):
        level = logging.WARNING if isinstance(error, UserError) else logging.ERROR
        logger.log(level, f"{prefix}{error.message}")
        if error.suggestion:
            logger.info(f"{prefix}Suggestion: {error.suggestion}")
        if isinstance(error, SystemError) and error.technical_details:
            logger.debug(f"{prefix}Technical details: {error.technical_details}")
    else:
        logger.error(f"{prefix}{type(error).__name__}: {error}")

    if include_traceback:
        import traceback

        logger.debug("".join(traceback.format_exception(type(error), error, error.__traceback__)))


def log_conversion_complete(
    logger: logging.Logger,
    unit_id: str,
    success: bool,
    duration_seconds: float,
    **kwargs: Dict[str, Any],
) -> None:
    """Log the completion of a single converter invocation.

    Args:
        logger: Logger instance
        unit_id: Id of the invoked converter
        success: Whether the invocation produced a result without raising
        duration_seconds: Duration in seconds
        **kwargs: Additional metadata
    """
    status = "ok" if success else "failed"
    extra = "".join(f" {key}={value}" for key, value in kwargs.items())
    logger.debug(f"{unit_id}: {status} in {duration_seconds * 1000:.1f}ms{extra}")


root_logger = setup_logging()
