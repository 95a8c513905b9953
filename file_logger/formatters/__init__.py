"""
Log formatters module

Turns log entries into the text lines written by sinks.
"""

from file_logger.formatters.base_formatter import BaseFormatter
from file_logger.formatters.text_formatter import TextFormatter

__all__ = [
    "BaseFormatter",
    "TextFormatter",
]
