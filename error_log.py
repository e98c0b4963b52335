import logging
import os
from typing import Optional

LOG_FORMAT = "[%(asctime)s] ERROR: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ErrorLog:
    """Append-only error log file, written through a dedicated logger.

    Each call to :meth:`error` adds one ``[yyyy-mm-dd HH:MM:SS] ERROR: <message>``
    line. The file is opened lazily, so it only appears once something fails.
    The log is never read back by the application.
    """

    def __init__(self, path: str) -> None:
        self.path = os.path.abspath(path)
        self._logger = logging.getLogger(f"libranet.errors.{self.path}")
        self._logger.setLevel(logging.ERROR)
        # Error entries go to the file only, not to the console handlers.
        self._logger.propagate = False
        self._handler: Optional[logging.Handler] = None
        for handler in self._logger.handlers:
            if isinstance(handler, logging.FileHandler):
                self._handler = handler
                break
        if self._handler is None:
            self._handler = logging.FileHandler(self.path, mode="a", encoding="utf-8", delay=True)
            self._handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            self._logger.addHandler(self._handler)

    def error(self, message: str) -> None:
        self._logger.error(message)
        self._handler.flush()

    def close(self) -> None:
        """Release the file handle; a later error reopens the file in append mode."""
        self._handler.close()
