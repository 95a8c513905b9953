"""
Logger facade

Formats log calls and hands the resulting lines to the registered writers.
"""

from __future__ import annotations
from typing import Any, List, Optional
import atexit
import sys
import threading
import weakref

from file_logger.core.log_level import LogLevel
from file_logger.core.log_entry import LogEntry
from file_logger.formatters.base_formatter import BaseFormatter
from file_logger.formatters.text_formatter import TextFormatter


class Logger:
    """
    Synchronous logging facade for one domain.

    Writers are plain objects with ``write(str)``; optional ``flush()`` and
    ``close()`` are called when present. Two capability attributes are
    honoured:

    - ``adds_timestamp``: when False the facade puts the timestamp in the
      line itself.
    - ``shared``: when False the writer may only serve one Logger.
    """

    # Writers that declared shared = False, mapped to their owning Logger.
    _owners: "weakref.WeakKeyDictionary[Any, Logger]" = weakref.WeakKeyDictionary()
    _owners_lock = threading.Lock()

    def __init__(self, domain: str = "", formatter: Optional[BaseFormatter] = None):
        self.domain = domain
        self._formatter = formatter or TextFormatter()
        self._writers: List[Any] = []
        self._lock = threading.Lock()
        self._running = True
        self._metrics = {"logged": 0, "errors": 0}

        atexit.register(self.shutdown)

    def add_writer(self, writer: Any) -> None:
        """
        Add a log writer.

        Raises:
            ValueError: If the writer is not shared and already belongs to
                        another Logger
        """
        if not getattr(writer, "shared", True):
            with Logger._owners_lock:
                owner = Logger._owners.get(writer)
                if owner is not None and owner is not self:
                    raise ValueError(
                        f"writer {writer!r} is already used by domain '{owner.domain}'"
                    )
                Logger._owners[writer] = self
        with self._lock:
            if writer not in self._writers:
                self._writers.append(writer)

    def remove_writer(self, writer: Any) -> None:
        """Detach a writer without closing it."""
        with self._lock:
            if writer in self._writers:
                self._writers.remove(writer)
        with Logger._owners_lock:
            if Logger._owners.get(writer) is self:
                del Logger._owners[writer]

    def log(self, level: LogLevel, message: str, **kwargs) -> None:
        """Log a message."""
        if not self._running:
            return

        entry = LogEntry(level=level, message=message, domain=self.domain, **kwargs)
        with self._lock:
            writers = list(self._writers)

        for writer in writers:
            with_timestamp = not getattr(writer, "adds_timestamp", False)
            line = self._formatter.format(entry, with_timestamp=with_timestamp) + "\n"
            try:
                writer.write(line)
            except Exception as e:
                self._metrics["errors"] += 1
                print(f"Writer error: {e}", file=sys.stderr)
        self._metrics["logged"] += 1

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self.log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self.log(LogLevel.INFO, message, **kwargs)

    def message(self, message: str, **kwargs) -> None:
        """Log notable message."""
        self.log(LogLevel.MESSAGE, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        self.log(LogLevel.WARNING, message, **kwargs)

    def critical(self, message: str, **kwargs) -> None:
        """Log critical message."""
        self.log(LogLevel.CRITICAL, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        self.log(LogLevel.ERROR, message, **kwargs)

    def flush(self):
        """Flush all writers."""
        with self._lock:
            writers = list(self._writers)
        for writer in writers:
            if hasattr(writer, 'flush'):
                writer.flush()

    def shutdown(self):
        """Close all writers. Later log calls are ignored."""
        if not self._running:
            return

        self._running = False
        with self._lock:
            writers, self._writers = self._writers, []

        for writer in writers:
            with Logger._owners_lock:
                if Logger._owners.get(writer) is self:
                    del Logger._owners[writer]
            if hasattr(writer, 'close'):
                writer.close()
        atexit.unregister(self.shutdown)

    def get_metrics(self) -> dict:
        """Get logging metrics."""
        return self._metrics.copy()
