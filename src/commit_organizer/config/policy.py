"""
Static exclusion policy.

The tables below decide which changed paths must never be committed by
the organizer: secrets, credentials and build artifacts. Each entry maps
a rule to the human readable reason reported when it matches.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Mapping, Pattern, Tuple


DEFAULT_EXCLUDED_PATHS: Dict[str, str] = {
    # Secrets and credentials
    ".env": "environment file may contain secrets",
    ".env.*": "environment file may contain secrets",
    "*.pem": "private key or certificate",
    "*.key": "private key",
    "*.p12": "certificate bundle",
    "*.pfx": "certificate bundle",
    "*.jks": "Java keystore",
    "*.keystore": "keystore",
    "id_rsa*": "SSH key",
    "id_dsa*": "SSH key",
    "id_ecdsa*": "SSH key",
    "id_ed25519*": "SSH key",
    ".npmrc": "package registry credentials",
    ".pypirc": "package registry credentials",
    ".netrc": "login credentials",
    "credentials.json": "credentials file",
    "*.tfstate": "infrastructure state may contain secrets",
    "*.tfstate.*": "infrastructure state may contain secrets",
    # Build artifacts
    "dist/*": "build artifact",
    "build/*": "build artifact",
    "node_modules/*": "installed dependency",
    "__pycache__/*": "bytecode cache",
    "*.pyc": "bytecode cache",
    "*.class": "compiled class file",
    "*.o": "object file",
    "*.min.js": "minified build artifact",
    "*.min.css": "minified build artifact",
    "*.log": "log file",
    ".DS_Store": "editor or OS metadata",
}

# Templates that only document which variables are expected
DEFAULT_ALLOWED_PATHS: Tuple[str, ...] = (
    ".env.example",
    ".env.sample",
    ".env.template",
)

DEFAULT_SECRET_PATTERNS: Dict[str, str] = {
    r"-----BEGIN (?:[A-Z]+ )?PRIVATE KEY-----": "content contains a private key",
    r"\bAKIA[0-9A-Z]{16}\b": "content resembles an AWS access key",
    r"\bgh[pousr]_[A-Za-z0-9]{36,}\b": "content resembles a GitHub token",
    r"\bxox[abprs]-[A-Za-z0-9-]{10,}": "content resembles a Slack token",
    r"\bsk-[A-Za-z0-9]{32,}\b": "content resembles an API secret key",
    (
        r"(?i)\b(?:api[_-]?key|secret[_-]?key|client[_-]?secret|password|passwd|access[_-]?token)"
        r"\b\s*[:=]\s*['\"][^'\"\s]{8,}['\"]"
    ): "content assigns a credential literal",
}


@dataclass(frozen=True)
class ExclusionPolicy:
    """Rules deciding which changes are kept out of every commit.

    Attributes
    ----------
    path_patterns : Mapping[str, str]
        Glob pattern -> reason. Patterns without ``/`` match the file
        name, patterns containing ``/`` match the path or any trailing
        part of it.
    secret_patterns : Mapping[str, str]
        Regular expression -> reason, applied to the lines a diff adds.
    allowed_paths : Tuple[str, ...]
        Globs exempt from the path rules (still scanned for secrets).
    """

    path_patterns: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_EXCLUDED_PATHS))
    secret_patterns: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_SECRET_PATTERNS))
    allowed_paths: Tuple[str, ...] = DEFAULT_ALLOWED_PATHS

    def compiled_secret_patterns(self) -> Tuple[Tuple[Pattern[str], str], ...]:
        return tuple((re.compile(pattern), reason) for pattern, reason in self.secret_patterns.items())


def default_policy() -> ExclusionPolicy:
    """Return the built-in exclusion policy."""
    return ExclusionPolicy()
