"""
Git client implementation for commit_organizer.

This module wraps the Git operations the organizer needs: locating the
repository root, reading working tree status and diffs, staging paths
and creating commits. Every call goes through :meth:`GitClient._run`
so that unit tests can mock a single seam.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


@dataclass
class FileChange:
    """A single entry of ``git status --porcelain``."""

    path: str
    status: str  # two-letter XY code, e.g. ' M', 'A ', 'R ', '??'
    orig_path: Optional[str] = None  # source path of a rename or copy


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def is_repo(path: Path) -> bool:
        """Return True if the given path is the root of a Git repository."""
        return (path / ".git").exists()

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if GitClient.is_repo(current):
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is
            True, or if the ``git`` executable cannot be started.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            logger.error("Git executable not found: %s", e)
            raise GitError("The 'git' executable was not found on PATH") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(
                result.stderr.strip()
                or result.stdout.strip()
                or f"'{' '.join(full_cmd)}' exited with status {result.returncode}"
            )
        return result

    def has_head(self) -> bool:
        """Return True if ``HEAD`` points at a commit (i.e. not an unborn branch)."""
        result = self._run(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return result.returncode == 0

    def head_sha(self) -> str:
        """Return the full SHA of the current ``HEAD`` commit."""
        return self._run(["rev-parse", "HEAD"], check=True).stdout.strip()

    # ------------------------------------------------------------------
    # Status and diffs
    # ------------------------------------------------------------------
    def get_changes(self, include_untracked: bool = True) -> List[FileChange]:
        """Get the list of changed paths in the working tree.

        Uses the NUL separated porcelain format so that paths with spaces
        or non-ASCII characters need no unquoting. Ignored files are never
        reported.

        Parameters
        ----------
        include_untracked : bool, optional
            Report untracked files (status ``??``), one entry per file.

        Raises
        ------
        GitError
            If the git status command fails.
        """
        untracked_mode = "all" if include_untracked else "no"
        result = self._run(
            ["status", "--porcelain=v1", "-z", f"--untracked-files={untracked_mode}"],
            check=True,
        )

        entries = result.stdout.split("\0")
        changes: List[FileChange] = []
        index = 0
        while index < len(entries):
            entry = entries[index]
            index += 1
            # Each entry is "XY <path>"; anything shorter is the trailing terminator
            if len(entry) < 4:
                continue

            status_code = entry[:2]
            path = entry[3:]
            if status_code == "!!":
                continue

            orig_path = None
            if "R" in status_code or "C" in status_code:
                # The origin path follows as its own NUL terminated field
                if index < len(entries):
                    orig_path = entries[index]
                    index += 1

            changes.append(FileChange(path=path, status=status_code, orig_path=orig_path))

        return changes

    def get_diff(self, path: str, revision: Optional[str] = "HEAD") -> str:
        """Return the unified diff of ``path`` against ``revision``.

        When ``revision`` is None the staged diff is returned instead,
        which is what an unborn branch offers.
        """
        args = ["diff", "--no-color", "--no-ext-diff"]
        args.append(revision if revision else "--cached")
        args.extend(["--", path])
        return self._run(args, check=True).stdout

    # ------------------------------------------------------------------
    # Staging and committing
    # ------------------------------------------------------------------
    def reset_index(self) -> None:
        """Unstage everything, leaving the working tree untouched."""
        self._run(["reset", "--quiet"], check=True)

    def stage_files(self, files: List[str]) -> None:
        """Stage the current content of the given files for commit.

        Paths matching ``.gitignore`` are staged as well: they were
        reported as changed, so they were force-added before.
        """
        for file in files:
            self._run(["add", "-f", "--", file], check=True)

    def stage_removals(self, files: List[str]) -> None:
        """Stage the removal of the given files.

        Files still present in the working tree stay there, untracked.
        """
        for file in files:
            self._run(["rm", "--cached", "--quiet", "--ignore-unmatch", "--", file], check=True)

    def commit(self, message: str) -> None:
        """Create a commit with the given message.

        Multi-line commit messages are supported. If the commit is
        rejected (nothing staged, failing hook, ...), a GitError is raised.
        """
        self._run(["commit", "-m", message], check=True)
