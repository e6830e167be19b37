"""
Logging system for tastream.

Provides human-readable console logs and an optional daily log file.
Indicators themselves never log; only the collaborator layers do
(factory, spec loading, state snapshots).
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

LOGGER_NAME = "tastream"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BOLD = "\033[1m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        # Color a copy so file handlers sharing the record stay plain
        record = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        record.msg = f"{color}{record.msg}{Colors.RESET}"
        return super().format(record)


class TastreamLogger:
    """
    Central logging system for tastream.

    Features:
    - Console output with colors
    - Optional daily file output (plain text)
    - Child loggers per module under the "tastream" namespace
    """

    _instance: Optional['TastreamLogger'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(
        self,
        log_dir: str = "logs",
        log_level: str = "INFO",
        log_to_file: bool = False,
    ):
        if TastreamLogger._initialized:
            return

        self.log_dir = Path(log_dir)
        self.log_to_file = log_to_file
        self.main_logger = self._create_logger(LOGGER_NAME, log_level)

        TastreamLogger._initialized = True

    def _create_logger(self, name: str, level: str) -> logging.Logger:
        """Create a configured logger instance."""
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper()))
        logger.handlers.clear()
        logger.propagate = False

        # Console handler with colors
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

        # File handler (plain text, no colors)
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            log_file = self.log_dir / f"tastream_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(
                FILE_FORMAT,
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

        return logger

    def child(self, name: str) -> logging.Logger:
        """Get a module logger that shares this logger's handlers."""
        return self.main_logger.getChild(name)


# Global logger instance
_logger: Optional[TastreamLogger] = None


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get or create the global logger instance.

    Settings come from tastream.config on first use. With a name, returns
    the child ``logging.Logger`` "tastream.<name>", otherwise the
    "tastream" logger itself.
    """
    global _logger
    if _logger is None:
        from ..config import get_config
        log_config = get_config().log
        _logger = TastreamLogger(
            log_config.log_dir,
            log_config.level,
            log_config.log_to_file,
        )
    if name:
        return _logger.child(name)
    return _logger.main_logger


def setup_logger(
    log_dir: str = "logs",
    log_level: str = "INFO",
    log_to_file: bool = False,
) -> TastreamLogger:
    """Initialize the logger with custom settings."""
    global _logger
    TastreamLogger._initialized = False
    TastreamLogger._instance = None
    _logger = TastreamLogger(log_dir, log_level, log_to_file)
    return _logger
