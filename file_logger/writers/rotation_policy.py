"""
Open and rotation policy for file sinks

Decides whether the active log file is reused or replaced when it is
opened, and shifts the chain of backup files when it is replaced.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional

from file_logger.writers.path_expander import PathExpander


@dataclass(frozen=True)
class RotationDiagnostic:
    """A single file operation that failed during open or rotation."""

    operation: str
    path: str
    error: str

    def __str__(self) -> str:
        return f"{self.operation} {self.path}: {self.error}"


@dataclass
class OpenResult:
    """
    Outcome of opening the active log file.

    ``size`` and ``append`` are the values the sink must adopt, whether or
    not the open itself succeeded.
    """

    file: Optional[BinaryIO]
    path: str
    size: int
    append: bool
    rotated: bool = False
    diagnostics: List[RotationDiagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.file is not None


class RotationPolicy:
    """
    Open/backup policy for a rotating log file.

    Index 0 is the active file; indices 1 .. max_files - 1 are backups,
    the highest being the oldest.

    Thread Safety:
        Not thread-safe. Callers must hold exclusive access to the sink.
    """

    def __init__(self, expander: PathExpander, max_size: int, max_files: int):
        """
        Initialize rotation policy.

        Args:
            expander: Path expander for the sink's template
            max_size: Size threshold in bytes (0 = no size limit)
            max_files: Chain length, active file included (backups + 1)
        """
        if max_files < 1:
            raise ValueError("max_files must be at least 1")
        self.expander = expander
        self.max_size = max_size
        self.max_files = max_files

    def needs_rotation(self, size: int, append: bool) -> bool:
        """Whether an existing active file of ``size`` bytes must be replaced."""
        if not append:
            return True
        return self.max_size > 0 and size >= self.max_size

    def backup_chain(self) -> List[str]:
        """
        Paths of all existing log files plus the first free slot.

        The last entry may or may not exist; it is the target of the
        oldest file when the chain is shifted.
        """
        chain = []
        for index in range(self.max_files):
            path = self.expander.expand(index)
            chain.append(path)
            if not os.path.isfile(path):
                break
        return chain

    def shift_backups(self) -> List[RotationDiagnostic]:
        """
        Move every log file one index up, dropping what does not fit.

        Failures are reported per file and never stop the remaining moves.

        Returns:
            Diagnostics for the operations that failed
        """
        diagnostics: List[RotationDiagnostic] = []
        chain = self.backup_chain()

        for index in range(len(chain) - 1, 0, -1):
            dest = chain[index]
            src = chain[index - 1]

            if not os.path.isdir(dest) and self._clear(dest, diagnostics):
                try:
                    os.rename(src, dest)
                except OSError as e:
                    diagnostics.append(RotationDiagnostic("rename", src, str(e)))
            else:
                self._remove(src, diagnostics)

        return diagnostics

    def open_for_write(self, size: int, append: bool) -> OpenResult:
        """
        Open the active log file, rotating first when required.

        Args:
            size: Byte count the sink currently holds for the active file
            append: Whether an existing active file may be appended to

        Returns:
            OpenResult with the open handle (None on failure) and the
            size/append values the sink must adopt
        """
        path = self.expander.expand(0)
        result = OpenResult(file=None, path=path, size=size, append=append)

        if os.path.exists(path):
            try:
                result.size = os.stat(path).st_size
            except OSError:
                pass

            if self.needs_rotation(result.size, result.append):
                result.diagnostics.extend(self.shift_backups())
                result.size = 0
                result.append = False
                result.rotated = True

        if not result.append:
            result.size = 0

        try:
            result.file = open(path, "ab" if result.append else "wb")
        except OSError as e:
            result.diagnostics.append(RotationDiagnostic("open", path, str(e)))
        return result

    @staticmethod
    def _clear(path: str, diagnostics: List[RotationDiagnostic]) -> bool:
        if not os.path.lexists(path):
            return True
        try:
            os.unlink(path)
        except OSError as e:
            diagnostics.append(RotationDiagnostic("unlink", path, str(e)))
            return False
        return True

    @staticmethod
    def _remove(path: str, diagnostics: List[RotationDiagnostic]) -> None:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            diagnostics.append(RotationDiagnostic("unlink", path, str(e)))
