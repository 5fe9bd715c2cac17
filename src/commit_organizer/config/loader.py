"""
Configuration loader for commit_organizer.

The organizer runs on its built-in exclusion policy. A JSON file can be
passed explicitly (``--config``) to extend or replace it::

    {
        "exclude_paths": {"secrets/*": "secret material"},
        "secret_patterns": {"BEGIN VAULT": "vault payload"},
        "allow_paths": ["config/.env.ci"],
        "replace_defaults": false
    }

If the file is missing, malformed, has fields of the wrong type or
contains an invalid regular expression, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

from .policy import (
    DEFAULT_ALLOWED_PATHS,
    DEFAULT_EXCLUDED_PATHS,
    DEFAULT_SECRET_PATTERNS,
    ExclusionPolicy,
    default_policy,
)


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where the root logger is not configured. Propagation is switched off
# until the CLI configures logging explicitly.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


KNOWN_KEYS = {"exclude_paths", "secret_patterns", "allow_paths", "replace_defaults"}


class ConfigError(Exception):
    """Raised when the policy configuration file is missing or invalid."""

    pass


def _string_mapping(data: Dict[str, Any], key: str) -> Dict[str, str]:
    value = data.get(key, {})
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise ConfigError(f"'{key}' must be an object mapping strings to strings")
    return value


def load_policy(config_path: Optional[Path] = None) -> ExclusionPolicy:
    """Build the exclusion policy, optionally extended by ``config_path``.

    Args:
        config_path: JSON file to read. When None the built-in policy is
            returned unchanged.

    Returns:
        The resulting :class:`ExclusionPolicy`.

    Raises:
        ConfigError: If the file is missing, malformed, or invalid.
    """
    if config_path is None:
        return default_policy()

    if not config_path.exists():
        logger.error("Configuration file '%s' does not exist", config_path)
        raise ConfigError(f"Missing configuration file: {config_path}")

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("The configuration must be a JSON object")

    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))

    replace = data.get("replace_defaults", False)
    if not isinstance(replace, bool):
        raise ConfigError("'replace_defaults' must be a boolean")

    exclude_paths = _string_mapping(data, "exclude_paths")
    secret_patterns = _string_mapping(data, "secret_patterns")
    for pattern in secret_patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ConfigError(f"Invalid secret pattern {pattern!r}: {exc}") from exc

    allow_paths = data.get("allow_paths", [])
    if not isinstance(allow_paths, list) or not all(isinstance(p, str) for p in allow_paths):
        raise ConfigError("'allow_paths' must be a list of strings")

    if replace:
        path_table, secret_table, allowed = {}, {}, ()
    else:
        path_table = dict(DEFAULT_EXCLUDED_PATHS)
        secret_table = dict(DEFAULT_SECRET_PATTERNS)
        allowed = DEFAULT_ALLOWED_PATHS
    path_table.update(exclude_paths)
    secret_table.update(secret_patterns)

    logger.debug("Loaded exclusion policy from: %s", config_path)
    return ExclusionPolicy(
        path_patterns=path_table,
        secret_patterns=secret_table,
        allowed_paths=tuple(allowed) + tuple(allow_paths),
    )
