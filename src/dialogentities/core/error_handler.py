"""Error Handling for dialogentities

Exception hierarchy with severities and a handler that turns failures into
logged diagnostics instead of propagating them to the dialog layer.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Type


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class DialogEntitiesError(Exception):
    """Base exception class for dialogentities."""

    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        self.message = message
        self.severity = severity
        super().__init__(self.message)


class ConfigurationError(DialogEntitiesError):
    """Error raised when configuration is invalid."""

    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.HIGH):
        super().__init__(message, severity)


class TemporalParseError(DialogEntitiesError):
    """Error raised when the natural language date parser fails."""

    def __init__(self, message: str, utterance: Optional[str] = None,
                 severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        self.utterance = utterance
        super().__init__(message, severity)


class ErrorHandler:
    """Records errors as log events and dispatches registered callbacks."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize error handler.

        Args:
            logger: Logger to record errors on, defaults to this module's logger
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_callbacks: Dict[Type[Exception], Callable[[Exception], None]] = {}

    def register_error_callback(self, exception_type: Type[Exception],
                              callback: Callable[[Exception], None]):
        """Register a callback for specific exception types.

        Args:
            exception_type: The exception type to handle
            callback: Function to call when this exception occurs
        """
        self.error_callbacks[exception_type] = callback

    def handle_error(self, error: Exception, context: Optional[str] = None) -> bool:
        """Handle an error with appropriate logging.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            True if error was handled successfully, False otherwise
        """
        try:
            severity = self._get_error_severity(error)
            error_message = self._format_error_message(error, context)

            self._log_error(error, error_message, severity)

            for error_type, callback in self.error_callbacks.items():
                if isinstance(error, error_type):
                    callback(error)
                    break

            return True

        except Exception as handler_error:
            # A failing callback must not take the caller down with it
            self.logger.error(f"Error handler failed: {handler_error}")
            return False

    def _get_error_severity(self, error: Exception) -> ErrorSeverity:
        """Determine error severity based on exception type.

        Args:
            error: The exception to analyze

        Returns:
            Appropriate severity level
        """
        if isinstance(error, DialogEntitiesError):
            return error.severity

        severity_map = {
            ValueError: ErrorSeverity.MEDIUM,
            TypeError: ErrorSeverity.MEDIUM,
            OverflowError: ErrorSeverity.MEDIUM,
            MemoryError: ErrorSeverity.CRITICAL,
        }

        return severity_map.get(type(error), ErrorSeverity.MEDIUM)

    def _format_error_message(self, error: Exception, context: Optional[str] = None) -> str:
        """Format error message for logging.

        Args:
            error: The exception
            context: Additional context

        Returns:
            Formatted error message
        """
        message = str(error)
        if context:
            message = f"{context}: {message}"

        return message

    def _log_error(self, error: Exception, message: str, severity: ErrorSeverity):
        """Log error with the level mapped from its severity."""
        log_methods = {
            ErrorSeverity.LOW: self.logger.info,
            ErrorSeverity.MEDIUM: self.logger.warning,
            ErrorSeverity.HIGH: self.logger.error,
            ErrorSeverity.CRITICAL: self.logger.critical,
        }

        log_method = log_methods[severity]
        log_method(message, exc_info=error if error.__traceback__ is not None else None)
