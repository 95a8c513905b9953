"""
Log entry data structure
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict
import threading

from file_logger.core.log_level import LogLevel


@dataclass
class LogEntry:
    """
    A single log call as seen by the facade, before formatting.
    """

    level: LogLevel
    message: str
    domain: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    thread_name: str = field(default_factory=lambda: threading.current_thread().name)
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate log entry after initialization."""
        if not isinstance(self.level, LogLevel):
            raise TypeError("level must be LogLevel enum")
        if not isinstance(self.message, str):
            self.message = str(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert log entry to dictionary.

        Returns:
            Dictionary representation
        """
        return {
            "level": self.level.name,
            "message": self.message,
            "domain": self.domain,
            "timestamp": self.timestamp.isoformat(),
            "thread_name": self.thread_name,
            "extra": self.extra,
        }
