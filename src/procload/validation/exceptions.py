"""
Error types and error reporting helpers.

procload distinguishes two kinds of bad input:

- `ParseError`: the monitoring document is not a JSON object at all.
- `ValidationError`: the input parsed, but a value is unusable (a document
  without a ``measurements`` list, an out-of-range config value, a bad
  command-line option).

The ``handle_*`` helpers log an error with a context string at a chosen
severity and then either re-raise it or, at the CLI boundary, exit.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Severities whose log records carry the active traceback.
_TRACEBACK_SEVERITIES = {ErrorSeverity.DEBUG, ErrorSeverity.CRITICAL}


class ProcloadError(Exception):
    """Base class for the errors procload raises on bad input."""


class ValidationError(ProcloadError):
    """
    Exception raised when an input value is unusable.

    Attributes:
        field_name: Dotted name of the offending field, e.g. ``report.output_format``
            or ``measurements``.
        value: The rejected value, kept for error messages.
        severity: How the error should be reported when it reaches a handler.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ParseError(ProcloadError):
    """Raised when a monitoring document is not a well-formed JSON object."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


def _as_severity(severity: Union[ErrorSeverity, str]) -> ErrorSeverity:
    if isinstance(severity, ErrorSeverity):
        return severity
    return ErrorSeverity(severity.lower())


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log ``error`` as "Error in <context>: <error>" and optionally re-raise it.

    Args:
        error: The exception that occurred
        context: Where the error occurred, e.g. "parsing configuration file"
        severity: Log level to report at; a string is matched case-insensitively
        reraise: Whether to re-raise the exception after logging
        logger: Logger to report through (defaults to this module's logger)
    """
    level = _as_severity(severity)
    log = getattr(logger or globals()['logger'], level.value)

    message = f"Error in {context}: {error}"
    if level in _TRACEBACK_SEVERITIES:
        log(message, exc_info=True)
    else:
        log(message)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle errors raised while loading config.toml."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle errors raised while reading input files."""
    handle_error(error, f"file {context}", **kwargs)


def handle_cli_error(
    error: Exception,
    context: str,
    exit_code: int = 1,
    include_traceback: bool = False,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Report an error at the command-line boundary and exit.

    Args:
        error: The exception that ended the command
        context: What the command was doing
        exit_code: Process exit status
        include_traceback: Log at CRITICAL (with traceback) instead of ERROR
        severity: Log level when no traceback is requested
        logger: Logger to report through

    Raises:
        SystemExit: Always, with ``exit_code``.
    """
    if include_traceback and severity == ErrorSeverity.ERROR:
        severity = ErrorSeverity.CRITICAL
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, logger=logger)

    sys.exit(exit_code)
