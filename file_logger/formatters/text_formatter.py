"""
Text formatter with customizable template

Formats log entries using a template string with placeholders
"""

from typing import Optional

from file_logger.core.log_entry import LogEntry
from file_logger.formatters.base_formatter import BaseFormatter


class TextFormatter(BaseFormatter):
    """
    Format log entries using a customizable template.

    Two templates are kept: one for writers that record their own
    timestamps and one that adds the timestamp itself.
    """

    DEFAULT_TEMPLATE = "[{timestamp}] [{level:8}] [{domain}] {message}"
    DEFAULT_PLAIN_TEMPLATE = "[{level:8}] [{domain}] {message}"

    def __init__(
        self,
        template: Optional[str] = None,
        plain_template: Optional[str] = None,
        timestamp_format: str = "%Y-%m-%dT%H:%M:%S.%f",
    ):
        """
        Initialize text formatter.

        Args:
            template: Format template used when a timestamp is wanted.
                     Available placeholders:
                     - {timestamp}: Timestamp
                     - {level}: Log level name
                     - {level:8}: Log level with padding
                     - {domain}: Log domain
                     - {message}: Log message
                     - {thread}: Thread name
            plain_template: Template used when the writer adds its own
                            timestamp
            timestamp_format: strftime format for timestamps

        Example:
            formatter = TextFormatter("{timestamp} {domain}: {message}")
        """
        self.template = template or self.DEFAULT_TEMPLATE
        self.plain_template = plain_template or self.DEFAULT_PLAIN_TEMPLATE
        self.timestamp_format = timestamp_format

    def format(self, entry: LogEntry, with_timestamp: bool = True) -> str:
        """
        Format log entry using the template.

        Args:
            entry: Log entry to format
            with_timestamp: Use the timestamped template

        Returns:
            Formatted string
        """
        # Milliseconds only
        timestamp_str = entry.timestamp.strftime(self.timestamp_format)
        if self.timestamp_format.endswith("%f"):
            timestamp_str = timestamp_str[:-3]

        format_dict = {
            "timestamp": timestamp_str,
            "level": str(entry.level),
            "domain": entry.domain,
            "message": entry.message,
            "thread": entry.thread_name,
        }

        template = self.template if with_timestamp else self.plain_template
        try:
            return template.format(**format_dict)
        except (KeyError, IndexError, ValueError) as e:
            # Fallback if template has unknown placeholder
            return f"[FORMAT ERROR: {e}] {entry.message}"

    def __repr__(self) -> str:
        """String representation."""
        return f"TextFormatter(template='{self.template}')"
