"""
Rotating file sink

Appends formatted log messages to a file and rotates it into numbered
backups once it grows past a size limit. Safe to call from many threads.
"""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional

from file_logger.core.logger_config import FileLoggerConfig
from file_logger.core.rw_lock import ReadWriteLock
from file_logger.writers.path_expander import PathExpander, ProcessIdentity
from file_logger.writers.rotation_policy import (
    OpenResult,
    RotationDiagnostic,
    RotationPolicy,
)


class SinkState(enum.Enum):
    """Lifecycle of a file sink. ERRORED and CLOSED are terminal."""

    UNOPENED = "unopened"
    OPEN = "open"
    ERRORED = "errored"
    CLOSED = "closed"

    @property
    def accepts_messages(self) -> bool:
        return self in (SinkState.UNOPENED, SinkState.OPEN)


@dataclass
class SinkStats:
    """
    Statistics for file sink monitoring.

    Tracks messages, file opens, rotations and the file operations that
    failed along the way.
    """

    messages_written: int = 0
    messages_dropped: int = 0
    write_errors: int = 0
    opens: int = 0
    rotations: int = 0
    open_failures: int = 0
    diagnostics: List[RotationDiagnostic] = field(default_factory=list)

    def record_write(self) -> None:
        """Record a message written to the file."""
        self.messages_written += 1

    def record_drop(self) -> None:
        """Record a message that never reached the file."""
        self.messages_dropped += 1

    def record_write_error(self) -> None:
        """Record a failed write; the message is dropped."""
        self.write_errors += 1
        self.messages_dropped += 1

    def record_flush_error(self) -> None:
        """Record a failed flush of an already written message."""
        self.write_errors += 1

    def record_open(self, result: OpenResult) -> None:
        """Record the outcome of opening the active file."""
        self.opens += 1
        if result.rotated:
            self.rotations += 1
        if not result.ok:
            self.open_failures += 1
        self.diagnostics.extend(result.diagnostics)

    def to_dict(self) -> dict:
        """Convert stats to dictionary for serialization."""
        return {
            "messages_written": self.messages_written,
            "messages_dropped": self.messages_dropped,
            "write_errors": self.write_errors,
            "opens": self.opens,
            "rotations": self.rotations,
            "open_failures": self.open_failures,
            "diagnostics": [str(d) for d in self.diagnostics],
        }


class FileSink:
    """
    Thread-safe log sink writing to a rotating file.

    The file is opened on the first write. Messages are written verbatim
    and flushed before write() returns. When the file reaches max_size it
    is moved to index 1 (older backups shift up) and a fresh file is
    started. If the file cannot be opened the sink stops accepting
    messages for good.

    Thread Safety:
        Writes share a read/write lock; opening and rotating take it
        exclusively. Byte-level ordering of concurrent writes is left to
        the file object.

    Example:
        sink = FileSink("/var/log/app-${USER}.log", max_size_mb=5, max_backups=3)
        sink.write("service started\\n")
        sink.close()
    """

    # Capability flags read by the logging facade.
    adds_timestamp = False
    shared = False

    def __init__(
        self,
        path: str,
        append: bool = True,
        max_size_mb: int = 0,
        max_backups: int = 10,
        identity: Optional[ProcessIdentity] = None,
        encoding: str = "utf-8",
        newline_overhead: int = 0,
    ):
        """
        Initialize file sink.

        Args:
            path: Log file path template (${USER}, ${PID}, ${IDX} allowed)
            append: Append to an existing active file on first open
            max_size_mb: Rotation threshold in MB (0 = never rotate by size)
            max_backups: Number of rotated files to keep
            identity: Values for ${USER}/${PID} (default: running process)
            encoding: Encoding used to turn messages into bytes
            newline_overhead: Extra bytes per message added by line-ending
                              translation outside this sink
        """
        config = FileLoggerConfig(
            path=path,
            append=append,
            max_size_mb=max_size_mb,
            max_backups=max_backups,
        )
        self.config = config
        self.path = config.path
        self.encoding = encoding
        self.newline_overhead = newline_overhead

        self._expander = PathExpander(config.path, identity)
        self._policy = RotationPolicy(
            self._expander, config.max_size, config.max_files
        )
        self._max_size = config.max_size

        self._lock = ReadWriteLock()
        self._size_lock = threading.Lock()
        self._file: Optional[BinaryIO] = None
        self._size = 0
        self._append = config.append
        self._state = SinkState.UNOPENED

        self._stats_lock = threading.Lock()
        self._stats = SinkStats()

    @classmethod
    def from_config(
        cls,
        config: FileLoggerConfig,
        identity: Optional[ProcessIdentity] = None,
        **kwargs,
    ) -> "FileSink":
        """Create a sink from a FileLoggerConfig."""
        return cls(
            path=config.path,
            append=config.append,
            max_size_mb=config.max_size_mb,
            max_backups=config.max_backups,
            identity=identity,
            **kwargs,
        )

    def write(self, message: str) -> None:
        """
        Append a message to the log file.

        Never raises. The message is dropped if the sink is errored or
        closed, or if the write itself fails.

        Args:
            message: Formatted message, written as-is
        """
        if not isinstance(message, str):
            message = str(message)
        data = message.encode(self.encoding, errors="replace")

        self._lock.acquire_read()
        try:
            if not self._state.accepts_messages:
                self._record(SinkStats.record_drop)
                return

            if self._file is None:
                self._upgrade(self._open_if_needed)
                if self._file is None:
                    self._record(SinkStats.record_drop)
                    return

            logfile = self._file
            try:
                logfile.write(data)
            except (OSError, ValueError):
                self._record(SinkStats.record_write_error)
                return
            self._record(SinkStats.record_write)

            if self._max_size > 0 and self._account(len(data)):
                self._upgrade(self._rotate_if_needed)
            else:
                self._flush_file(logfile)
        finally:
            self._lock.release_read()

    def flush(self) -> None:
        """Flush the active file, if one is open."""
        with self._lock.read_locked():
            if self._file is not None:
                self._flush_file(self._file)

    def close(self) -> None:
        """Flush and close the active file. Later writes are dropped."""
        with self._lock.write_locked():
            self._close_file()
            # ERRORED is terminal.
            if self._state is not SinkState.ERRORED:
                self._state = SinkState.CLOSED

    @property
    def state(self) -> SinkState:
        """Current lifecycle state."""
        return self._state

    @property
    def errored(self) -> bool:
        """Whether the sink gave up after failing to open its file."""
        return self._state is SinkState.ERRORED

    @property
    def is_open(self) -> bool:
        """Whether an active file is currently open."""
        return self._file is not None

    @property
    def size(self) -> int:
        """Bytes accounted to the active file."""
        with self._size_lock:
            return self._size

    @property
    def max_size(self) -> int:
        """Rotation threshold in bytes (0 = unlimited)."""
        return self._max_size

    @property
    def max_files(self) -> int:
        """Length of the rotation chain, active file included."""
        return self._policy.max_files

    @property
    def current_path(self) -> str:
        """Expanded path of the active file."""
        return self._expander.expand(0)

    def get_stats(self) -> SinkStats:
        """
        Get sink statistics.

        Returns:
            Copy of current sink statistics
        """
        with self._stats_lock:
            return SinkStats(
                messages_written=self._stats.messages_written,
                messages_dropped=self._stats.messages_dropped,
                write_errors=self._stats.write_errors,
                opens=self._stats.opens,
                rotations=self._stats.rotations,
                open_failures=self._stats.open_failures,
                diagnostics=list(self._stats.diagnostics),
            )

    def _upgrade(self, action) -> None:
        """Run ``action`` with exclusive access while holding a read lock."""
        self._lock.release_read()
        try:
            with self._lock.write_locked():
                action()
        finally:
            self._lock.acquire_read()

    def _account(self, nbytes: int) -> bool:
        """Add a written message to the size; True once the limit is reached."""
        with self._size_lock:
            self._size += nbytes + self.newline_overhead
            return self._size >= self._max_size

    def _open_if_needed(self) -> None:
        # Another thread may have opened (or failed to open) meanwhile.
        if self._file is None and self._state is SinkState.UNOPENED:
            self._open_locked()

    def _rotate_if_needed(self) -> None:
        # Only the first of several racing writers rotates.
        if self._state is not SinkState.OPEN or self.size < self._max_size:
            return
        self._close_file()
        self._append = False
        self._open_locked()

    def _open_locked(self) -> None:
        """Open the active file. Caller holds the write lock."""
        result = self._policy.open_for_write(self.size, self._append)
        with self._size_lock:
            self._size = result.size
        self._append = result.append
        self._record(SinkStats.record_open, result)

        if result.ok:
            self._file = result.file
            self._state = SinkState.OPEN
        else:
            self._file = None
            self._state = SinkState.ERRORED

    def _close_file(self) -> None:
        if self._file is None:
            return
        logfile, self._file = self._file, None
        try:
            logfile.flush()
        except (OSError, ValueError):
            pass
        finally:
            try:
                logfile.close()
            except OSError:
                pass

    def _flush_file(self, logfile: BinaryIO) -> None:
        try:
            logfile.flush()
        except (OSError, ValueError):
            self._record(SinkStats.record_flush_error)

    def _record(self, method, *args) -> None:
        with self._stats_lock:
            method(self._stats, *args)

    def __enter__(self) -> "FileSink":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        return f"FileSink(path='{self.path}', state={self._state.value})"
