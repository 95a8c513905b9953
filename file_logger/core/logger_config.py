"""
File logger configuration

Holds the four inputs of a rotating file sink: path template, append flag,
size limit and backup count.
"""

from dataclasses import dataclass
from typing import Any, Mapping

BYTES_PER_MB = 1024 * 1024

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"{key} must be a boolean, got {value!r}")


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class FileLoggerConfig:
    """
    Rotating file sink configuration.

    Immutable once built. ``max_size_mb`` of 0 disables size-based rotation.
    ``max_backups`` counts rotated copies only; the active file is extra.
    With ``max_backups`` of 0 no copy is kept: rotation truncates the
    active file in place.
    """

    path: str
    append: bool = True
    max_size_mb: int = 0
    max_backups: int = 10

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not isinstance(self.path, str) or not self.path:
            raise ValueError("path must be a non-empty string")
        if self.max_size_mb < 0:
            raise ValueError("max_size_mb cannot be negative")
        if self.max_backups < 0:
            raise ValueError("max_backups cannot be negative")

    @property
    def max_size(self) -> int:
        """Size threshold in bytes (0 = unlimited)."""
        return self.max_size_mb * BYTES_PER_MB

    @property
    def max_files(self) -> int:
        """Length of the rotation chain, active file included."""
        return self.max_backups + 1

    @classmethod
    def default(cls, path: str) -> "FileLoggerConfig":
        """Create default configuration for ``path``."""
        return cls(path=path)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FileLoggerConfig":
        """
        Build a configuration from parsed key/value settings.

        Accepts both the snake_case field names and the keys used by
        ini-style logging sections (``data``, ``maxLogSize``,
        ``maxOldLogFiles``). Unknown keys are ignored.

        Args:
            data: Mapping of setting names to values (strings allowed)

        Returns:
            New FileLoggerConfig

        Raises:
            ValueError: If a value cannot be converted or is out of range
        """
        path = data.get("path", data.get("data"))
        if path is None:
            raise ValueError("path is required")

        kwargs = {"path": str(path)}
        if "append" in data:
            kwargs["append"] = _to_bool("append", data["append"])
        for key in ("max_size_mb", "maxLogSize"):
            if key in data:
                kwargs["max_size_mb"] = _to_int(key, data[key])
                break
        for key in ("max_backups", "maxOldLogFiles"):
            if key in data:
                kwargs["max_backups"] = _to_int(key, data[key])
                break
        return cls(**kwargs)
