"""
Heuristics for classifying file changes into commit categories.

Each record is inspected for path signals (where the file lives, what it
is called) and diff signals (what the added lines look like). Every
signal that fires nominates a category; when several fire, the most
structurally distinct category wins according to
:data:`CATEGORY_PRECEDENCE`. The rules are deterministic so that the
same working tree always yields the same plan.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Sequence, Set

from commit_organizer.grouping.group_model import Category
from commit_organizer.reader.change_record import ChangeRecord, ChangeStatus


# First entry wins when a record matches several categories
CATEGORY_PRECEDENCE = (
    Category.CONFIG,
    Category.TEST,
    Category.DOCS,
    Category.STYLE,
    Category.REFACTOR,
    Category.FIX,
    Category.FEATURE,
)

CONFIG_FILE_NAMES = {
    "Dockerfile",
    "Makefile",
    "Procfile",
    "Jenkinsfile",
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "pyproject.toml",
    "setup.cfg",
    "setup.py",
    "tox.ini",
    "Pipfile",
    "Pipfile.lock",
    "poetry.lock",
    "Cargo.toml",
    "go.mod",
    "go.sum",
    "pom.xml",
    "CMakeLists.txt",
    "Gemfile",
    "Podfile",
    "Package.swift",
    ".gitignore",
    ".gitattributes",
    ".editorconfig",
    ".dockerignore",
}
CONFIG_EXTENSIONS = {".yml", ".yaml", ".toml", ".ini", ".cfg", ".conf", ".json", ".gradle", ".xcconfig"}
CONFIG_NAME_PATTERNS = [
    r"^docker-compose.*\.ya?ml$",
    r"^requirements.*\.(txt|in)$",
    r"^tsconfig.*\.json$",
    r"^\.(eslintrc|prettierrc|babelrc|stylelintrc|pre-commit-config).*",
    r"^.*\.config\.[cm]?[jt]s$",
]
CONFIG_DIRECTORIES = {".github", ".circleci", ".gitlab", ".devcontainer", ".vscode"}

TEST_DIRECTORIES = {"test", "tests", "__tests__", "spec", "specs", "testing"}
TEST_NAME_PATTERNS = [
    r"^test_.*\.py$",
    r"^.*_test\.(py|go|rb)$",
    r"^.*\.(test|spec)\.[cm]?[jt]sx?$",
    r"^.*Tests?\.(java|kt|swift|cs)$",
    r"^conftest\.py$",
]

DOC_EXTENSIONS = {".md", ".markdown", ".rst", ".adoc", ".txt"}
DOC_DIRECTORIES = {"doc", "docs", "documentation"}
DOC_NAME_PREFIXES = ("README", "CHANGELOG", "CHANGES", "LICENSE", "CONTRIBUTING", "AUTHORS", "NOTICE")

FIX_PATH_PATTERN = re.compile(r"(?:^|[/_.\-])(?:fix|fixes|bug|bugfix|hotfix|patch)(?:$|[/_.\-])", re.IGNORECASE)
FIX_CONTENT_PATTERN = re.compile(
    r"\b(?:fix(?:e[sd])?|bug|hotfix|workaround|regression|off-by-one|null check)\b", re.IGNORECASE
)
REFACTOR_PATH_PATTERN = re.compile(r"(?:^|[/_.\-])refactor", re.IGNORECASE)
REFACTOR_CONTENT_PATTERN = re.compile(
    r"\b(?:refactor(?:ed|ing)?|rename[ds]?|clean ?up|extract(?:ed)?|simplif(?:y|ied)|deprecated?)\b",
    re.IGNORECASE,
)
DEFINITION_PATTERN = re.compile(
    r"^\s*(?:export\s+)?(?:async\s+)?(?:def|class|function|func|fn|interface|struct|enum|protocol)\s+\w",
)


def _name_matches(name: str, patterns: Sequence[str]) -> bool:
    return any(re.match(pattern, name) for pattern in patterns)


def is_config_path(path: PurePosixPath) -> bool:
    if path.name in CONFIG_FILE_NAMES or path.suffix.lower() in CONFIG_EXTENSIONS:
        return True
    if _name_matches(path.name, CONFIG_NAME_PATTERNS):
        return True
    return bool(CONFIG_DIRECTORIES.intersection(path.parts[:-1]))


def is_test_path(path: PurePosixPath) -> bool:
    if TEST_DIRECTORIES.intersection(part.lower() for part in path.parts[:-1]):
        return True
    return _name_matches(path.name, TEST_NAME_PATTERNS)


def is_docs_path(path: PurePosixPath) -> bool:
    if path.name.startswith(DOC_NAME_PREFIXES):
        return True
    if DOC_DIRECTORIES.intersection(part.lower() for part in path.parts[:-1]):
        return True
    # requirements.txt and friends are configuration, caught above
    return path.suffix.lower() in DOC_EXTENSIONS and not _name_matches(path.name, CONFIG_NAME_PATTERNS)


def is_whitespace_only(record: ChangeRecord) -> bool:
    """Return True if the diff of a modified file only changes whitespace."""
    if record.status is not ChangeStatus.MODIFIED:
        return False
    added = record.added_lines()
    removed = record.removed_lines()
    if not added and not removed:
        return False
    # Same non-whitespace content on both sides, or only blank lines touched
    return re.sub(r"\s", "", "".join(added)) == re.sub(r"\s", "", "".join(removed))


def detect_categories(record: ChangeRecord) -> Set[Category]:
    """Return every category nominated by the record's path and diff."""
    path = PurePosixPath(record.path)
    added_text = "\n".join(record.added_lines())
    candidates: Set[Category] = set()

    if is_config_path(path):
        candidates.add(Category.CONFIG)
    if is_test_path(path):
        candidates.add(Category.TEST)
    if is_docs_path(path):
        candidates.add(Category.DOCS)
    if is_whitespace_only(record):
        candidates.add(Category.STYLE)

    if record.status is ChangeStatus.DELETED:
        candidates.add(Category.REFACTOR)
    elif REFACTOR_PATH_PATTERN.search(record.path) or REFACTOR_CONTENT_PATTERN.search(added_text):
        candidates.add(Category.REFACTOR)

    if record.status is ChangeStatus.MODIFIED and (
        FIX_PATH_PATTERN.search(record.path) or FIX_CONTENT_PATTERN.search(added_text)
    ):
        candidates.add(Category.FIX)

    if record.status.is_new:
        candidates.add(Category.FEATURE)
    elif record.status is ChangeStatus.MODIFIED and any(
        DEFINITION_PATTERN.match(line) for line in record.added_lines()
    ):
        candidates.add(Category.FEATURE)

    return candidates


def classify_change(
    record: ChangeRecord,
    precedence: Sequence[Category] = CATEGORY_PRECEDENCE,
) -> Category:
    """Classify a change into a single :class:`Category`.

    Parameters
    ----------
    record : ChangeRecord
        The change to classify.
    precedence : Sequence[Category], optional
        Tie-break order; the earliest nominated category wins.

    Returns
    -------
    Category
        The winning category. A modified file with no signal at all is a
        narrowing change to existing code and classifies as ``FIX``; any
        other record without a signal is a ``FEATURE``.
    """
    candidates = detect_categories(record)
    for category in precedence:
        if category in candidates:
            return category
    if record.status is ChangeStatus.MODIFIED:
        return Category.FIX
    return Category.FEATURE
