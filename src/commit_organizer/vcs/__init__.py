"""
Version control system (VCS) integration.

This package contains the client used to talk to Git, the external
collaborator that owns repository history. The client exposes methods
for locating the repository root, listing local changes, reading diffs,
staging paths and committing.
"""

from .git_client import FileChange, GitClient, GitError  # noqa: F401
