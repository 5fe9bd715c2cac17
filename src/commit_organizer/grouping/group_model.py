"""
Data models for commit grouping.

A :class:`ChangeGroup` is a cohesive set of changes destined for exactly
one commit. A :class:`CommitPlan` is the ordered list of groups for one
invocation of the organizer; it is never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from commit_organizer.reader.change_record import ChangeRecord


class Category(Enum):
    """Kind of change a group represents."""

    FEATURE = "feature"
    FIX = "fix"
    REFACTOR = "refactor"
    DOCS = "docs"
    CONFIG = "config"
    TEST = "test"
    STYLE = "style"


@dataclass(frozen=True)
class ChangeGroup:
    """Representation of a grouped commit.

    Attributes
    ----------
    category : Category
        The kind of change shared by every member.
    members : Tuple[ChangeRecord, ...]
        Records in the group, sorted by path. A record belongs to exactly
        one group.
    summary : str
        Imperative description derived from the category and the common
        path prefix of the members, e.g. ``Fix auth.ts``.
    scope : str
        Top-level directory the members were bucketed on; empty for files
        in the repository root.
    """

    category: Category
    members: Tuple[ChangeRecord, ...]
    summary: str
    scope: str = ""

    @property
    def paths(self) -> List[str]:
        return [member.path for member in self.members]


@dataclass(frozen=True)
class CommitPlan:
    """Groups in commit order, together with the order they were sorted by."""

    groups: Tuple[ChangeGroup, ...]
    order_policy: Tuple[Category, ...]

    def __len__(self) -> int:
        return len(self.groups)

    def __iter__(self):
        return iter(self.groups)
