"""
Grouping logic for commits.

This package classifies changes into commit categories and partitions
them into groups. See :mod:`commit_organizer.grouping.change_classifier`,
:mod:`commit_organizer.grouping.grouping_engine` and
:mod:`commit_organizer.grouping.group_model` for details.
"""

from .change_classifier import CATEGORY_PRECEDENCE, classify_change  # noqa: F401
from .group_model import Category, ChangeGroup, CommitPlan  # noqa: F401
from .grouping_engine import GroupingError, group_changes  # noqa: F401
