# artisan/utils/logger.py
import datetime
import sys
from collections import deque
from typing import Deque, List, Tuple

from artisan.config import LOG_HISTORY_SIZE, LOG_LEVEL

class LogLevel:
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4 # Only fatal errors

    NAMES = {DEBUG: "DEBUG", INFO: "INFO", WARNING: "WARN", ERROR: "ERROR", CRITICAL: "CRIT"}

    @classmethod
    def from_name(cls, name: str) -> int:
        lookup = {"DEBUG": cls.DEBUG, "INFO": cls.INFO, "WARN": cls.WARNING, "WARNING": cls.WARNING,
                  "ERROR": cls.ERROR, "CRIT": cls.CRITICAL, "CRITICAL": cls.CRITICAL}
        return lookup.get(str(name).upper(), cls.INFO)

class Logger:
    _instance = None
    _level = LogLevel.from_name(LOG_LEVEL)
    _stream = sys.stderr
    # (level, source, message) for everything at or above the active level
    _history: Deque[Tuple[int, str, str]] = deque(maxlen=LOG_HISTORY_SIZE)

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
        return cls._instance

    @classmethod
    def set_level(cls, level):
        """Sets the minimum logging level. Accepts a LogLevel value or its name."""
        cls._level = LogLevel.from_name(level) if isinstance(level, str) else level

    @classmethod
    def get_level(cls) -> int:
        return cls._level

    @classmethod
    def set_stream(cls, stream):
        """Redirects output; None silences printing but keeps history."""
        cls._stream = stream

    @classmethod
    def _log(cls, level: int, source: str, message: str):
        if level < cls._level:
            return
        cls._history.append((level, source, message))
        if cls._stream is None:
            return
        timestamp = datetime.datetime.now().strftime("%H:%M:%S")
        level_name = LogLevel.NAMES.get(level, "LOG")

        # Format: [TIME] [LEVEL] [Source] Message
        print(f"[{timestamp}] [{level_name:<5}] [{source}] {message}", file=cls._stream)

    @classmethod
    def debug(cls, source: str, message: str):
        cls._log(LogLevel.DEBUG, source, message)

    @classmethod
    def info(cls, source: str, message: str):
        cls._log(LogLevel.INFO, source, message)

    @classmethod
    def warning(cls, source: str, message: str):
        cls._log(LogLevel.WARNING, source, message)

    @classmethod
    def error(cls, source: str, message: str):
        cls._log(LogLevel.ERROR, source, message)

    @classmethod
    def critical(cls, source: str, message: str):
        cls._log(LogLevel.CRITICAL, source, message)

    @classmethod
    def history(cls, min_level: int = LogLevel.DEBUG, source: str = "") -> List[Tuple[int, str, str]]:
        """Recent log records, optionally filtered by minimum level and source."""
        return [rec for rec in cls._history
                if rec[0] >= min_level and (not source or rec[1] == source)]

    @classmethod
    def clear_history(cls):
        cls._history.clear()

    @classmethod
    def separator(cls, level: int = LogLevel.DEBUG):
        """Prints a separator line if the level is active."""
        if level >= cls._level and cls._stream is not None:
            print("-" * 60, file=cls._stream)
