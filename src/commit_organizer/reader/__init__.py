"""
Reading repository state.

:mod:`commit_organizer.reader.change_reader` inspects a working tree and
produces :class:`~commit_organizer.reader.change_record.ChangeRecord`
objects for every changed path.
"""

from .change_record import ChangeRecord, ChangeStatus  # noqa: F401
from .change_reader import RepositoryUnavailable, open_repository, read_changes  # noqa: F401
