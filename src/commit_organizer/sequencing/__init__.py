"""
Turning groups into commits.

:mod:`commit_organizer.sequencing.commit_message` generates commit
messages; :mod:`commit_organizer.sequencing.commit_sequencer` orders the
groups and creates the commits.
"""

from .commit_message import CommitMessage, build_commit_message  # noqa: F401
from .commit_sequencer import (  # noqa: F401
    COMMIT_ORDER,
    CommitRejected,
    CommitResult,
    CommitSequencer,
    order_groups,
    plan_commits,
)
