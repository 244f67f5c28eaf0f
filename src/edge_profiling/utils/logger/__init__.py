from .logger import Logger
from .log_storage_strategy import LogStorageStrategy
from .local_file_strategy import LocalFileStrategy
from .memory_strategy import LogEntry, MemoryStrategy

__all__ = ["Logger", "LogStorageStrategy", "LocalFileStrategy", "LogEntry", "MemoryStrategy"]
