"""
Process-wide logger for edge profiling.

Managers report what they do through Logger.log(). Where entries go is
decided by the installed LogStorageStrategy; with none installed (the default
for library use) a call returns after one attribute check. Entries below
min_priority are dropped before they reach the strategy.
"""

import os
import threading
from datetime import datetime
from enum import Enum

from .local_file_strategy import LocalFileStrategy

DEFAULT_LOG_PATH = "/tmp/edge_profiling_logs.txt"
LOG_PATH_ENV_VAR = "EDGE_PROFILING_LOG_PATH"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Logger:
    """Static logger; never instantiated."""

    class LogPriority(Enum):
        DEBUG = 1
        INFO = 2
        WARNING = 3
        ERROR = 4
        CRITICAL = 5

        @classmethod
        def from_name(cls, name):
            """Case-insensitive lookup, e.g. "warning" -> WARNING."""
            try:
                return cls[str(name).upper()]
            except KeyError:
                raise ValueError(f"Unknown log priority '{name}'") from None

    is_logging_enabled = True
    log_storage_strategy = None
    min_priority = LogPriority.DEBUG
    _lock = threading.RLock()

    @classmethod
    def initialize(cls, file_location=None, min_priority=None):
        """
        Start writing to a log file unless a strategy is already installed.

        Args:
            file_location: Log file path. Falls back to $EDGE_PROFILING_LOG_PATH,
                then /tmp/edge_profiling_logs.txt.
            min_priority: Optional threshold applied before the first entry.
        """
        with cls._lock:
            if min_priority is not None:
                cls.set_min_priority(min_priority)
            if cls.log_storage_strategy is not None:
                return
            file_location = file_location or os.getenv(LOG_PATH_ENV_VAR, DEFAULT_LOG_PATH)
            cls.set_log_storage_strategy(LocalFileStrategy(file_location))
            cls.log(f"Logger initialized with file storage at {file_location}.", cls.LogPriority.INFO)

    @classmethod
    def log(cls, message, priority=LogPriority.DEBUG):
        with cls._lock:
            strategy = cls.log_storage_strategy
            if not (cls.is_logging_enabled and strategy):
                return
            if priority.value < cls.min_priority.value:
                return
            strategy.store_log(message, priority.name, datetime.now().strftime(TIMESTAMP_FORMAT))

    @classmethod
    def set_log_storage_strategy(cls, log_storage_strategy):
        """Install a strategy; None detaches storage entirely."""
        with cls._lock:
            cls.log_storage_strategy = log_storage_strategy

    @classmethod
    def set_min_priority(cls, priority):
        """Drop entries below priority (a LogPriority or its name)."""
        if not isinstance(priority, cls.LogPriority):
            priority = cls.LogPriority.from_name(priority)
        with cls._lock:
            cls.min_priority = priority

    @classmethod
    def flush_logs(cls):
        with cls._lock:
            if cls.is_logging_enabled and cls.log_storage_strategy:
                cls.log_storage_strategy.flush_logs()

    @classmethod
    def disable_logging(cls):
        with cls._lock:
            cls.log("Logging disabled")
            cls.is_logging_enabled = False

    @classmethod
    def enable_logging(cls):
        with cls._lock:
            cls.is_logging_enabled = True
            cls.log("Logging enabled")
