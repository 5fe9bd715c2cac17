"""
Grouping engine.

Partitions filtered change records into :class:`ChangeGroup` objects.
Records are classified one by one, then bucketed by category and by the
top-level directory they live in, so that e.g. documentation changes in
``docs/`` and in ``api/`` become separate commits. The output does not
depend on the order of the input.
"""

from __future__ import annotations

import logging
import posixpath
from collections import defaultdict
from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Sequence, Tuple

from commit_organizer.grouping.change_classifier import CATEGORY_PRECEDENCE, classify_change
from commit_organizer.grouping.group_model import Category, ChangeGroup
from commit_organizer.reader.change_record import ChangeRecord, ChangeStatus


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# (all members new, mixed or modified, all members deleted)
SUMMARY_TEMPLATES: Dict[Category, Tuple[str, str, str]] = {
    Category.FEATURE: ("Add {}", "Extend {}", "Remove {}"),
    Category.FIX: ("Fix {}", "Fix {}", "Fix {}"),
    Category.REFACTOR: ("Refactor {}", "Refactor {}", "Remove {}"),
    Category.DOCS: ("Add documentation in {}", "Update documentation in {}", "Remove documentation in {}"),
    Category.CONFIG: ("Add configuration in {}", "Update configuration in {}", "Remove configuration in {}"),
    Category.TEST: ("Add tests in {}", "Update tests in {}", "Remove tests in {}"),
    Category.STYLE: ("Format {}", "Format {}", "Format {}"),
}


class GroupingError(Exception):
    """Raised when grouping fails to produce a partition of its input."""

    pass


def scope_of(path: str) -> str:
    """Return the top-level directory of ``path`` ('' for root files)."""
    parts = PurePosixPath(path).parts
    return parts[0] if len(parts) > 1 else ""


def common_target(members: Sequence[ChangeRecord]) -> str:
    """Describe what the members have in common.

    A single member is named by its file name, several members by their
    deepest common directory, or by their count when they share none.
    """
    if len(members) == 1:
        return PurePosixPath(members[0].path).name
    common = posixpath.commonpath([member.path for member in members])
    if common:
        return common
    return f"{len(members)} files"


def summarize(category: Category, members: Sequence[ChangeRecord]) -> str:
    """Build the imperative summary of a group, e.g. ``Fix auth.ts``."""
    new_template, update_template, delete_template = SUMMARY_TEMPLATES[category]
    if all(member.status.is_new for member in members):
        template = new_template
    elif all(member.status is ChangeStatus.DELETED for member in members):
        template = delete_template
    else:
        template = update_template
    return template.format(common_target(members))


def _check_partition(records: List[ChangeRecord], groups: List[ChangeGroup]) -> None:
    assigned = [member for group in groups for member in group.members]
    if len(assigned) != len(records) or {id(r) for r in assigned} != {id(r) for r in records}:
        raise GroupingError(
            f"Grouping assigned {len(assigned)} record(s) but received {len(records)}"
        )


def group_changes(
    records: Iterable[ChangeRecord],
    precedence: Sequence[Category] = CATEGORY_PRECEDENCE,
) -> List[ChangeGroup]:
    """Partition ``records`` into cohesive groups.

    Parameters
    ----------
    records : Iterable[ChangeRecord]
        Records that survived the sensitive-path filter.
    precedence : Sequence[Category], optional
        Tie-break order passed on to the classifier.

    Returns
    -------
    List[ChangeGroup]
        Groups ordered by category declaration order, then scope. Every
        record appears in exactly one group; members are sorted by path.

    Raises
    ------
    GroupingError
        If the partition property does not hold.
    """
    records = list(records)
    buckets: Dict[Tuple[Category, str], List[ChangeRecord]] = defaultdict(list)
    for record in records:
        category = classify_change(record, precedence)
        logger.debug("Classified %s as %s", record.path, category.value)
        buckets[(category, scope_of(record.path))].append(record)

    category_rank = {category: index for index, category in enumerate(Category)}
    groups = []
    for category, scope in sorted(buckets, key=lambda key: (category_rank[key[0]], key[1])):
        members = tuple(sorted(buckets[(category, scope)], key=lambda record: record.path))
        groups.append(
            ChangeGroup(
                category=category,
                members=members,
                summary=summarize(category, members),
                scope=scope,
            )
        )

    _check_partition(records, groups)
    return groups
