"""
Sensitive-path filter.

Removes changes that must never be committed (secrets, credentials,
build artifacts) before grouping. Path rules are glob patterns matched
with :mod:`fnmatch`; content rules are regular expressions run against
the lines a diff adds. The filter never raises: records that match no
rule are returned unchanged and in their original order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import PurePosixPath
from typing import Iterable, List, Optional, Tuple

from commit_organizer.config.policy import ExclusionPolicy, default_policy
from commit_organizer.reader.change_record import ChangeRecord


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


@dataclass(frozen=True)
class ExcludedRecord:
    """A change kept out of every commit, with the rule that matched."""

    record: ChangeRecord
    reason: str
    rule: str

    @property
    def path(self) -> str:
        return self.record.path


@dataclass
class FilterResult:
    """Outcome of :func:`filter_sensitive`."""

    kept: List[ChangeRecord] = field(default_factory=list)
    excluded: List[ExcludedRecord] = field(default_factory=list)


def matches_glob(path: str, pattern: str) -> bool:
    """Match ``pattern`` against a repository path.

    Patterns without a ``/`` are compared with the file name only, so
    ``.env`` also catches ``services/api/.env``. Patterns with a ``/`` are
    compared with the full path and with every trailing part of it, so
    ``node_modules/*`` also catches ``web/node_modules/react/index.js``.
    """
    path = path.replace("\\", "/")
    if "/" not in pattern:
        return fnmatch(PurePosixPath(path).name, pattern)
    return fnmatch(path, pattern) or fnmatch(path, f"*/{pattern}")


def _match_path(record: ChangeRecord, policy: ExclusionPolicy) -> Optional[Tuple[str, str]]:
    if any(matches_glob(record.path, allowed) for allowed in policy.allowed_paths):
        return None
    for pattern, reason in policy.path_patterns.items():
        if matches_glob(record.path, pattern):
            return pattern, reason
    return None


def _match_content(record: ChangeRecord, compiled) -> Optional[Tuple[str, str]]:
    added = "\n".join(record.added_lines())
    if not added:
        return None
    for regex, reason in compiled:
        if regex.search(added):
            return regex.pattern, reason
    return None


def filter_sensitive(
    records: Iterable[ChangeRecord],
    policy: Optional[ExclusionPolicy] = None,
) -> FilterResult:
    """Split ``records`` into the ones safe to commit and the excluded ones.

    Parameters
    ----------
    records : Iterable[ChangeRecord]
        Records produced by the change reader.
    policy : ExclusionPolicy, optional
        Rules to apply; the built-in policy when omitted.

    Returns
    -------
    FilterResult
        ``kept`` preserves input order; ``excluded`` pairs every removed
        record with the reason and rule of the first matching rule.
    """
    policy = policy if policy is not None else default_policy()
    compiled = policy.compiled_secret_patterns()

    result = FilterResult()
    for record in records:
        match = _match_path(record, policy) or _match_content(record, compiled)
        if match is None:
            result.kept.append(record)
            continue
        rule, reason = match
        logger.info("Excluding %s: %s", record.path, reason)
        result.excluded.append(ExcludedRecord(record=record, reason=reason, rule=rule))
    return result
