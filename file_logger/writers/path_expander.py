"""
Log path template expansion

Expands the variables embedded in a log file path and places the rotation
index in the file name.

Recognized variables:
    ${USER}  login name of the current user
    ${PID}   id of the current process
    ${IDX}   rotation index of the file (0 is the active log)
"""

from __future__ import annotations

import getpass
import os
from dataclasses import dataclass
from typing import Optional

USER_VAR = "${USER}"
PID_VAR = "${PID}"
INDEX_VAR = "${IDX}"


@dataclass(frozen=True)
class ProcessIdentity:
    """User and process values substituted into path templates."""

    user_name: str
    pid: int

    @classmethod
    def current(cls) -> "ProcessIdentity":
        """Identity of the running process."""
        try:
            user_name = getpass.getuser()
        except (KeyError, OSError):
            user_name = "unknown"
        return cls(user_name=user_name, pid=os.getpid())


def _replace_all(path: str, token: str, value: str) -> str:
    # Left to right; text inserted for this token is not rescanned.
    parts = []
    start = 0
    while True:
        found = path.find(token, start)
        if found < 0:
            parts.append(path[start:])
            return "".join(parts)
        parts.append(path[start:found])
        parts.append(value)
        start = found + len(token)


def insert_index(path: str, index: int) -> str:
    """
    Put ``.{index}`` before the extension of the file name in ``path``.

    The extension is whatever follows the last dot of the final path
    component. Paths without one get the index appended.
    """
    sep = path.rfind(".")
    pathsep = path.rfind("/")
    if pathsep < 0:
        pathsep = path.rfind("\\")

    if sep >= 0 and sep > pathsep:
        return f"{path[:sep]}.{index}.{path[sep + 1:]}"
    return f"{path}.{index}"


class PathExpander:
    """Expands one path template for any rotation index."""

    def __init__(self, template: str, identity: Optional[ProcessIdentity] = None):
        """
        Initialize path expander.

        Args:
            template: Path that may contain ${USER}, ${PID} and ${IDX}
            identity: Values for ${USER} and ${PID}
                      (default: the running process)
        """
        self.template = template
        self.identity = identity or ProcessIdentity.current()

    @property
    def has_index(self) -> bool:
        """Whether the template places the index itself."""
        return INDEX_VAR in self.template

    def expand(self, index: int = 0) -> str:
        """
        Expand the template for the given rotation index.

        Args:
            index: Rotation index (0 = active log file)

        Returns:
            Concrete file path
        """
        path = self.template
        path = _replace_all(path, USER_VAR, self.identity.user_name)
        path = _replace_all(path, PID_VAR, str(self.identity.pid))
        path = _replace_all(path, INDEX_VAR, str(index))

        # Backups must always carry their index, even without ${IDX}.
        if index != 0 and not self.has_index:
            path = insert_index(path, index)
        return path

    def __repr__(self) -> str:
        return f"PathExpander(template='{self.template}')"


def expand_path(
    template: str,
    index: int = 0,
    identity: Optional[ProcessIdentity] = None,
) -> str:
    """Expand ``template`` for ``index`` in one call."""
    return PathExpander(template, identity).expand(index)
