"""
Change reader.

Turns the state of a Git working tree into a list of
:class:`~commit_organizer.reader.change_record.ChangeRecord` objects: one
record per path that differs from the last commit, untracked files
included. Reading never modifies the repository.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from commit_organizer.reader.change_record import ChangeRecord, ChangeStatus
from commit_organizer.vcs.git_client import FileChange, GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


MAX_FILE_SIZE_FOR_ANALYSIS = 200_000
BINARY_SNIFF_BYTES = 8000


class RepositoryUnavailable(Exception):
    """Raised when the given location is not a usable Git repository."""

    pass


def open_repository(start: Path) -> GitClient:
    """Return a :class:`GitClient` for the repository containing ``start``.

    Raises
    ------
    RepositoryUnavailable
        If no repository is found in ``start`` or any of its parents.
    """
    root = GitClient.find_repo_root(start)
    if root is None:
        raise RepositoryUnavailable(f"No Git repository found at or above {start}")
    logger.debug("Using repository root %s", root)
    return GitClient(root)


def _status_for(change: FileChange) -> Optional[ChangeStatus]:
    """Map a porcelain XY code onto a :class:`ChangeStatus`.

    Returns None for entries that carry no change against the last commit.
    """
    code = change.status
    if code == "??":
        return ChangeStatus.UNTRACKED
    index_status, worktree_status = code[0], code[1]
    if index_status in ("A", "R", "C") and worktree_status == "D":
        # Staged as new, then removed again: nothing to record
        return None
    if "D" in code:
        return ChangeStatus.DELETED
    if index_status in ("A", "R", "C"):
        return ChangeStatus.ADDED
    if "U" in code:
        logger.warning("Path %s has unresolved merge conflicts", change.path)
    return ChangeStatus.MODIFIED


def _synthesize_new_file_diff(client: GitClient, path: str) -> str:
    """Build an all-additions diff for a file Git has never seen."""
    abs_path = client.repo_root / path
    try:
        with abs_path.open("rb") as handle:
            data = handle.read(MAX_FILE_SIZE_FOR_ANALYSIS)
    except OSError as exc:
        logger.debug("Could not read untracked file %s: %s", path, exc)
        return ""

    if b"\0" in data[:BINARY_SNIFF_BYTES]:
        return ""

    text = data.decode("utf-8", errors="replace")
    content = text.splitlines()
    lines = ["--- /dev/null", f"+++ b/{path}", f"@@ -0,0 +1,{len(content)} @@"]
    lines.extend(f"+{line}" for line in content)
    return "\n".join(lines) + "\n"


def _read_diff(client: GitClient, path: str, status: ChangeStatus, has_head: bool) -> str:
    if status is ChangeStatus.UNTRACKED:
        return _synthesize_new_file_diff(client, path)
    try:
        return client.get_diff(path, revision="HEAD" if has_head else None)
    except GitError as exc:
        # The classifier can still work from the path alone
        logger.debug("No diff available for %s: %s", path, exc)
        return ""


def read_changes(client: GitClient) -> List[ChangeRecord]:
    """Read the working tree of ``client``'s repository.

    Parameters
    ----------
    client : GitClient
        Client bound to the repository root.

    Returns
    -------
    List[ChangeRecord]
        One record per changed path, sorted by path. A rename yields a
        deleted record for the old path and an added record for the new
        one.

    Raises
    ------
    RepositoryUnavailable
        If Git cannot report the repository status.
    """
    try:
        entries = client.get_changes(include_untracked=True)
        has_head = client.has_head()
    except GitError as exc:
        raise RepositoryUnavailable(f"Cannot read repository at {client.repo_root}: {exc}") from exc

    statuses: Dict[str, ChangeStatus] = {}
    for entry in entries:
        if entry.orig_path and entry.status[0] == "R":
            statuses.setdefault(entry.orig_path, ChangeStatus.DELETED)
        status = _status_for(entry)
        if status is None:
            continue
        # "D  f" plus "?? f": removed from the index, file kept on disk
        if status is ChangeStatus.UNTRACKED and statuses.get(entry.path) is ChangeStatus.DELETED:
            continue
        statuses[entry.path] = status

    records = [
        ChangeRecord(path=path, status=status, diff_text=_read_diff(client, path, status, has_head))
        for path, status in sorted(statuses.items())
    ]
    logger.debug("Read %d changed path(s)", len(records))
    return records
