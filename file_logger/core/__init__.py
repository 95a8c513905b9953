"""
Core module for the file logger

This module contains:
- Logger: Logging facade dispatching to writers
- LogEntry: Log entry data structure
- LogLevel: Log level enumeration
- FileLoggerConfig: File sink configuration
- ReadWriteLock: Shared/exclusive lock used by sinks
"""

from file_logger.core.logger import Logger
from file_logger.core.log_entry import LogEntry
from file_logger.core.log_level import LogLevel
from file_logger.core.logger_config import FileLoggerConfig
from file_logger.core.rw_lock import ReadWriteLock

__all__ = ["Logger", "LogEntry", "LogLevel", "FileLoggerConfig", "ReadWriteLock"]
