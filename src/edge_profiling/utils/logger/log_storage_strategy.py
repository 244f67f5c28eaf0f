class LogStorageStrategy:
    """
    Destination for Logger entries.

    Logger formats nothing itself: it hands over the message, the priority
    name and a formatted timestamp, and the strategy decides the layout.
    """

    def store_log(self, message, priority, timestamp):
        """
        Args:
            message (str): Text of the entry.
            priority (str): Priority name, e.g. "WARNING".
            timestamp (str): "%Y-%m-%d %H:%M:%S" time of the entry.
        """
        raise NotImplementedError()

    def flush_logs(self):
        """Discard everything stored so far."""
        raise NotImplementedError()
