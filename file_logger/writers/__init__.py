"""Writers module - Log output handlers"""

from file_logger.writers.file_sink import FileSink, SinkState, SinkStats
from file_logger.writers.path_expander import PathExpander, ProcessIdentity, expand_path
from file_logger.writers.rotation_policy import RotationDiagnostic, RotationPolicy

__all__ = [
    "FileSink",
    "SinkState",
    "SinkStats",
    "PathExpander",
    "ProcessIdentity",
    "expand_path",
    "RotationDiagnostic",
    "RotationPolicy",
]
