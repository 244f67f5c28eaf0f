from datetime import datetime
from pathlib import Path

from .log_storage_strategy import LogStorageStrategy


class LocalFileStrategy(LogStorageStrategy):
    """
    Plain-text log file, one "[timestamp] [PRIORITY] message" line per entry.

    Creating the strategy starts the file over with a header line; relative
    paths are taken from the working directory and missing parent
    directories are created.
    """

    def __init__(self, file_location):
        path = Path(file_location)
        if not path.is_absolute():
            path = Path.cwd() / path
        path.parent.mkdir(parents=True, exist_ok=True)

        self._path = path
        self.file_location = str(path)
        self._write_header("LOG INITIALIZATION")

    def store_log(self, message, priority, timestamp):
        with self._path.open("a") as log_file:
            log_file.write(f"[{timestamp}] [{priority}] {message}\n")

    def flush_logs(self):
        self._write_header("LOG FLUSHED")

    def _write_header(self, label):
        self._path.write_text(f"{label}: {datetime.now()}\n")
