"""
Log level enumeration

Severity tags carried by log entries. The facade only uses them for
formatting; it does not filter on them.
"""

from enum import IntEnum


class LogLevel(IntEnum):
    """
    Log level enumeration.

    Ordered from least to most severe.
    """

    DEBUG = 10      # Debug information
    INFO = 20       # Informational messages
    MESSAGE = 25    # Normal but notable
    WARNING = 30    # Warning messages
    CRITICAL = 40   # Recoverable failures
    ERROR = 50      # Fatal errors

    def __str__(self) -> str:
        """String representation of log level."""
        return self.name.lower()

    @classmethod
    def from_string(cls, level_str: str) -> "LogLevel":
        """
        Convert string to LogLevel.

        Args:
            level_str: Level name (case-insensitive, "warn" accepted)

        Returns:
            LogLevel enum value

        Raises:
            ValueError: If level_str is not valid
        """
        name = level_str.strip().upper()
        if name == "WARN":
            name = "WARNING"
        if name in cls.__members__:
            return cls[name]
        raise ValueError(f"Invalid log level: {level_str}")
