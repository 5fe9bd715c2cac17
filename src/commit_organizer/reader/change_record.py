"""
Data model for a single changed path.

A :class:`ChangeRecord` is produced once per path by the change reader
and is never mutated afterwards; the filter, grouping engine and commit
sequencer only ever pass records around.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List


class ChangeStatus(Enum):
    """State of a path relative to the last commit."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    UNTRACKED = "untracked"

    @property
    def is_new(self) -> bool:
        return self in (ChangeStatus.ADDED, ChangeStatus.UNTRACKED)


@dataclass(frozen=True)
class ChangeRecord:
    """A changed path together with its status and unified diff.

    Attributes
    ----------
    path : str
        Path relative to the repository root, always using ``/``.
    status : ChangeStatus
        Whether the path was added, modified, deleted or is untracked.
    diff_text : str
        Unified diff against the last commit. Empty for binary files or
        when no diff could be obtained.
    """

    path: str
    status: ChangeStatus
    diff_text: str = ""

    def _hunk_lines(self) -> List[str]:
        """Return the diff lines after the file header.

        Everything before the first ``@@`` hunk header is header. A diff
        without any hunk header is taken to be hunk content only.
        """
        lines = self.diff_text.splitlines()
        for index, line in enumerate(lines):
            if line.startswith("@@"):
                return lines[index + 1:]
        return lines

    def added_lines(self) -> List[str]:
        """Return the lines the diff adds, without the leading ``+``."""
        return [line[1:] for line in self._hunk_lines() if line.startswith("+")]

    def removed_lines(self) -> List[str]:
        """Return the lines the diff removes, without the leading ``-``."""
        return [line[1:] for line in self._hunk_lines() if line.startswith("-")]
