"""Centralized Logging Management for dialogentities

Handles log configuration, formatting, and output management for the
recognizers. Nothing is attached to the root logger: the library only
configures its own ``dialogentities`` logger hierarchy.
"""

import logging
import logging.handlers
import re
import sys
import threading
from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .config_manager import LoggingConfig


LIBRARY_LOGGER = "dialogentities"


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Format log record with colors for console output."""
        log_message = super().format(record)
        return f"{self.COLORS.get(record.levelname, '')}{log_message}{self.COLORS['RESET']}"


def parse_file_size(size: str) -> int:
    """Convert a size string such as ``10MB`` into bytes."""
    match = re.match(r'^(\d+)([KMG])B$', size.strip().upper())
    if not match:
        raise ValueError(f"Invalid file size: {size}")
    multiplier = {'K': 1024, 'M': 1024 ** 2, 'G': 1024 ** 3}[match.group(2)]
    return int(match.group(1)) * multiplier


class LoggingManager:
    """Centralized logging configuration and management."""

    _instance: Optional['LoggingManager'] = None
    _initialized: bool = False

    def __new__(cls) -> 'LoggingManager':
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize logging manager (only once)."""
        if self._initialized:
            return

        self.loggers: Dict[str, logging.Logger] = {}
        self.handlers: Dict[str, logging.Handler] = {}
        self._lock = threading.Lock()
        self._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get or create a logger with the specified name.

        Args:
            name: Logger name (typically __name__ of the module)

        Returns:
            Logger instance
        """
        manager = cls()
        return manager._get_logger_instance(name)

    def _get_logger_instance(self, name: str) -> logging.Logger:
        """Internal method to get logger instance."""
        with self._lock:
            if name in self.loggers:
                return self.loggers[name]

            logger = logging.getLogger(name)
            self.loggers[name] = logger
            return logger

    def configure(self, config: 'LoggingConfig'):
        """Apply a logging configuration to the library logger.

        Replaces any handlers installed by a previous call, so calling it
        again with a new configuration is safe.

        Args:
            config: Validated logging section of the settings
        """
        library_logger = logging.getLogger(LIBRARY_LOGGER)

        with self._lock:
            for handler in self.handlers.values():
                library_logger.removeHandler(handler)
                handler.close()
            self.handlers.clear()

            library_logger.setLevel(getattr(logging, config.level.upper()))

            if config.log_to_console:
                console_handler = logging.StreamHandler(sys.stdout)
                console_handler.setFormatter(ColoredFormatter(
                    '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                    datefmt='%H:%M:%S'
                ))
                library_logger.addHandler(console_handler)
                self.handlers['console'] = console_handler

            if config.file_path:
                log_file = Path(config.file_path)
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.handlers.RotatingFileHandler(
                    log_file,
                    maxBytes=parse_file_size(config.max_file_size),
                    backupCount=config.backup_count
                )
                file_handler.setFormatter(logging.Formatter(
                    '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
                    datefmt='%Y-%m-%d %H:%M:%S'
                ))
                library_logger.addHandler(file_handler)
                self.handlers['file'] = file_handler

    def set_log_level(self, level: str):
        """Set the logging level of the library logger.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f'Invalid log level: {level}')

        logging.getLogger(LIBRARY_LOGGER).setLevel(numeric_level)

    def add_custom_handler(self, handler: logging.Handler, level: Optional[str] = None):
        """Add a custom handler to the library logger.

        Args:
            handler: The logging handler to add
            level: Optional log level for the handler
        """
        if level:
            numeric_level = getattr(logging, level.upper(), None)
            if isinstance(numeric_level, int):
                handler.setLevel(numeric_level)

        logging.getLogger(LIBRARY_LOGGER).addHandler(handler)
