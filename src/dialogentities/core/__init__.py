"""Core modules for dialogentities.

Configuration, logging, error handling and time sources shared by the
recognizers.
"""

from .clock import Clock, FixedClock, SystemClock
from .config_manager import (
    ConfigManager,
    LoggingConfig,
    MatchingConfig,
    RecognizerSettings,
    TemporalConfig
)
from .error_handler import (
    DialogEntitiesError,
    ConfigurationError,
    TemporalParseError,
    ErrorHandler,
    ErrorSeverity
)
from .logging_manager import LoggingManager

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "ConfigManager",
    "LoggingConfig",
    "MatchingConfig",
    "RecognizerSettings",
    "TemporalConfig",
    "DialogEntitiesError",
    "ConfigurationError",
    "TemporalParseError",
    "ErrorHandler",
    "ErrorSeverity",
    "LoggingManager"
]
