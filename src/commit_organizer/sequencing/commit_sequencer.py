"""
Commit sequencer.

Orders change groups according to a fixed category policy and turns
each group into one commit: stage the group's paths, then commit them
with a generated message. Commits are created strictly one after the
other. When Git rejects a commit the sequencer stops immediately; it
neither retries nor rolls back the commits already made.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from commit_organizer.grouping.group_model import Category, ChangeGroup, CommitPlan
from commit_organizer.reader.change_record import ChangeStatus
from commit_organizer.sequencing.commit_message import CommitMessage, build_commit_message
from commit_organizer.vcs.git_client import GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


COMMIT_ORDER: Tuple[Category, ...] = (
    Category.CONFIG,
    Category.REFACTOR,
    Category.FEATURE,
    Category.FIX,
    Category.TEST,
    Category.DOCS,
    Category.STYLE,
)


@dataclass(frozen=True)
class CommitResult:
    """A commit created for one group."""

    group: ChangeGroup
    message: CommitMessage
    sha: str


class CommitRejected(Exception):
    """Raised when Git refuses to create the commit for a group.

    Attributes
    ----------
    failed_index : int
        Position of the rejected group in the plan (0-based).
    group : ChangeGroup
        The rejected group.
    committed : List[CommitResult]
        Commits created before the failure, in order.
    reason : str
        Error reported by Git.
    """

    def __init__(self, failed_index: int, group: ChangeGroup, committed: List[CommitResult], reason: str) -> None:
        self.failed_index = failed_index
        self.group = group
        self.committed = committed
        self.reason = reason
        super().__init__(
            f"Commit {failed_index + 1} ({group.category.value}: {', '.join(group.paths)}) "
            f"was rejected: {reason}"
        )

    @property
    def last_successful_index(self) -> int:
        """Index of the last committed group, -1 if none was committed."""
        return self.failed_index - 1


def order_groups(groups: Iterable[ChangeGroup], order: Sequence[Category] = COMMIT_ORDER) -> List[ChangeGroup]:
    """Sort ``groups`` by ``order``; groups of one category are sorted by scope."""
    rank = {category: index for index, category in enumerate(order)}
    return sorted(groups, key=lambda group: (rank.get(group.category, len(rank)), group.scope, group.paths))


def plan_commits(groups: Iterable[ChangeGroup], order: Sequence[Category] = COMMIT_ORDER) -> CommitPlan:
    """Build the :class:`CommitPlan` for ``groups``."""
    return CommitPlan(groups=tuple(order_groups(groups, order)), order_policy=tuple(order))


class CommitSequencer:
    """Apply a :class:`CommitPlan` to a repository."""

    def __init__(self, client: GitClient) -> None:
        self.client = client

    @staticmethod
    def preview(plan: CommitPlan) -> List[Tuple[List[str], CommitMessage]]:
        """Return the ``(paths, message)`` commit operations without running them."""
        return [(group.paths, build_commit_message(group)) for group in plan.groups]

    def _commit_group(self, group: ChangeGroup, message: CommitMessage) -> str:
        removed = [member.path for member in group.members if member.status is ChangeStatus.DELETED]
        present = [member.path for member in group.members if member.status is not ChangeStatus.DELETED]
        if present:
            self.client.stage_files(present)
        if removed:
            self.client.stage_removals(removed)
        self.client.commit(str(message))
        return self.client.head_sha()

    def run(
        self,
        plan: CommitPlan,
        on_commit: Optional[Callable[[int, CommitResult], None]] = None,
    ) -> List[CommitResult]:
        """Create one commit per group of ``plan``, in plan order.

        Parameters
        ----------
        plan : CommitPlan
            Groups to commit.
        on_commit : callable, optional
            Called with ``(index, CommitResult)`` after every commit.

        Returns
        -------
        List[CommitResult]
            The commits created, in order.

        Raises
        ------
        CommitRejected
            If Git rejects a commit. Earlier commits stay in place and no
            further group is processed.
        """
        committed: List[CommitResult] = []
        if not plan.groups:
            return committed

        try:
            # Only the group being committed may be staged at any time
            self.client.reset_index()
        except GitError as exc:
            raise CommitRejected(0, plan.groups[0], committed, str(exc)) from exc

        for index, group in enumerate(plan.groups):
            message = build_commit_message(group)
            logger.debug("Committing group %d/%d: %s", index + 1, len(plan.groups), message.subject)
            try:
                sha = self._commit_group(group, message)
            except GitError as exc:
                logger.error("Commit for group %d (%s) rejected: %s", index + 1, group.category.value, exc)
                raise CommitRejected(index, group, committed, str(exc)) from exc

            result = CommitResult(group=group, message=message, sha=sha)
            committed.append(result)
            logger.info("Committed %s %s", sha[:7], message.subject)
            if on_commit is not None:
                on_commit(index, result)

        return committed
