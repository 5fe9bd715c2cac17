"""
End-to-end pipeline.

Change reader -> sensitive-path filter -> grouping engine -> commit
sequencer. Repository state is read once; everything up to the commit
plan happens in memory, and commits are then created one by one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from commit_organizer.config.policy import ExclusionPolicy
from commit_organizer.filtering.sensitive_filter import ExcludedRecord, filter_sensitive
from commit_organizer.grouping.group_model import Category, CommitPlan
from commit_organizer.grouping.grouping_engine import group_changes
from commit_organizer.reader.change_reader import open_repository, read_changes
from commit_organizer.reader.change_record import ChangeRecord
from commit_organizer.sequencing.commit_sequencer import (
    COMMIT_ORDER,
    CommitResult,
    CommitSequencer,
    plan_commits,
)


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class NothingToCommit(Exception):
    """Raised when no group is left to commit.

    This is informational: the repository is clean, or every change was
    excluded. ``excluded`` lists the records the filter removed.
    """

    def __init__(self, excluded: Optional[List[ExcludedRecord]] = None) -> None:
        self.excluded = excluded or []
        if self.excluded:
            message = f"Nothing to commit; {len(self.excluded)} change(s) excluded"
        else:
            message = "Nothing to commit; the working tree is clean"
        super().__init__(message)


@dataclass
class PlanOutcome:
    plan: CommitPlan
    excluded: List[ExcludedRecord] = field(default_factory=list)


@dataclass
class OrganizeReport:
    """What a run of :func:`organize` planned and committed."""

    plan: CommitPlan
    excluded: List[ExcludedRecord]
    commits: List[CommitResult]
    dry_run: bool = False


def build_plan(
    records: Iterable[ChangeRecord],
    policy: Optional[ExclusionPolicy] = None,
    order: Sequence[Category] = COMMIT_ORDER,
) -> PlanOutcome:
    """Filter, group and order ``records`` into a commit plan.

    Raises
    ------
    NothingToCommit
        If no group remains after filtering.
    """
    filtered = filter_sensitive(records, policy)
    groups = group_changes(filtered.kept)
    if not groups:
        raise NothingToCommit(filtered.excluded)
    plan = plan_commits(groups, order)
    logger.debug("Planned %d commit(s), excluded %d path(s)", len(plan), len(filtered.excluded))
    return PlanOutcome(plan=plan, excluded=filtered.excluded)


def organize(start: Path, policy: Optional[ExclusionPolicy] = None, dry_run: bool = False) -> OrganizeReport:
    """Organize the uncommitted changes of the repository containing ``start``.

    With ``dry_run`` the plan is computed but nothing is committed.

    Raises RepositoryUnavailable, NothingToCommit or CommitRejected.
    """
    client = open_repository(start)
    outcome = build_plan(read_changes(client), policy)
    if dry_run:
        return OrganizeReport(plan=outcome.plan, excluded=outcome.excluded, commits=[], dry_run=True)

    commits = CommitSequencer(client).run(outcome.plan)
    return OrganizeReport(plan=outcome.plan, excluded=outcome.excluded, commits=commits)
