"""
Base formatter interface
"""

from abc import ABC, abstractmethod
from file_logger.core.log_entry import LogEntry


class BaseFormatter(ABC):
    """
    Abstract base class for log formatters.

    Formatters turn LogEntry objects into the strings handed to writers.
    """

    @abstractmethod
    def format(self, entry: LogEntry, with_timestamp: bool = True) -> str:
        """
        Format a log entry into a string.

        Args:
            entry: The log entry to format
            with_timestamp: Include the entry's timestamp

        Returns:
            Formatted string, without trailing newline
        """
        pass

    def __call__(self, entry: LogEntry) -> str:
        """Allow formatters to be callable."""
        return self.format(entry)
