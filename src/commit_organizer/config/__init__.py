"""
Configuration for commit_organizer.

The built-in exclusion tables live in
:mod:`commit_organizer.config.policy`; :mod:`commit_organizer.config.loader`
reads an optional JSON file that extends them.
"""

from .loader import ConfigError, load_policy  # noqa: F401
from .policy import ExclusionPolicy, default_policy  # noqa: F401
