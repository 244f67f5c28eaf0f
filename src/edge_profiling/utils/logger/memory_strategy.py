from collections import deque
from dataclasses import dataclass
from typing import List, Optional

from .log_storage_strategy import LogStorageStrategy


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    priority: str
    message: str


class MemoryStrategy(LogStorageStrategy):
    """
    Keeps the most recent entries in memory, oldest dropped first.

    Meant for front ends that show a live log next to the graph, and for tests.
    """

    def __init__(self, capacity: int = 1000):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.entries = deque(maxlen=capacity)

    def store_log(self, message, priority, timestamp):
        self.entries.append(LogEntry(timestamp, priority, message))

    def flush_logs(self):
        self.entries.clear()

    def messages(self, priority: Optional[str] = None) -> List[str]:
        """Stored messages in arrival order, optionally only one priority name."""
        return [e.message for e in self.entries if priority is None or e.priority == priority]
