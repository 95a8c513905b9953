"""
BSD 3-Clause License

Copyright (c) 2021, 🍀☀🌕🌥 🌊
All rights reserved.

File Logger - A thread-safe rotating file log sink
"""

__version__ = "1.0.0"
__author__ = "kcenon"
__email__ = "kcenon@naver.com"

from file_logger.core.logger import Logger
from file_logger.core.log_entry import LogEntry
from file_logger.core.log_level import LogLevel
from file_logger.core.logger_config import FileLoggerConfig
from file_logger.writers.file_sink import FileSink, SinkState

# Import submodules (not all classes by default)
from file_logger import formatters
from file_logger import writers

__all__ = [
    "Logger",
    "LogEntry",
    "LogLevel",
    "FileLoggerConfig",
    "FileSink",
    "SinkState",
    "formatters",
    "writers",
]
