"""
Commit message generation.

Messages follow the usual Git conventions:

  <Imperative subject, capitalized, no period, at most 50 characters>

  <Body wrapped at 72 columns, only for groups with several members,
   listing every affected path with its status>
"""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass
from typing import List, Optional

from commit_organizer.grouping.group_model import Category, ChangeGroup


SUBJECT_MAX_LENGTH = 50
BODY_WRAP_WIDTH = 72

CATEGORY_LABELS = {
    Category.FEATURE: "Feature",
    Category.FIX: "Fix",
    Category.REFACTOR: "Refactoring",
    Category.DOCS: "Documentation",
    Category.CONFIG: "Configuration",
    Category.TEST: "Test",
    Category.STYLE: "Formatting",
}

# Words a subject must not end on once its target has been cut
DANGLING_WORDS = {"a", "across", "and", "for", "from", "in", "of", "the", "to", "with"}
MIN_TARGET_LENGTH = 8


@dataclass(frozen=True)
class CommitMessage:
    subject: str
    body: Optional[str] = None

    def __str__(self) -> str:
        if self.body:
            return f"{self.subject}\n\n{self.body}"
        return self.subject


def _finish_subject(text: str) -> str:
    text = text.rstrip(" .")
    return text[:1].upper() + text[1:]


def _complete_subject(shortened: str, subject: str, max_length: int) -> str:
    """Keep a word-truncated subject from ending on a preposition.

    When there is room, the cut target (usually a file name) is appended
    in shortened form; otherwise the dangling words are dropped.
    """
    words = shortened.split()
    if not words or words[-1].lower() not in DANGLING_WORDS:
        return shortened
    remaining = subject.split()[len(words):]
    room = max_length - len(shortened) - 1
    if remaining and room >= MIN_TARGET_LENGTH:
        return f"{shortened} {remaining[0][:room]}"
    while words and words[-1].lower() in DANGLING_WORDS:
        words.pop()
    return " ".join(words)


def build_subject(summary: str, max_length: int = SUBJECT_MAX_LENGTH) -> str:
    """Turn a group summary into a commit subject of at most ``max_length`` characters.

    Long paths are first reduced to their last component; if that is not
    enough the subject is cut at a word boundary.
    """
    subject = _finish_subject(" ".join(summary.split()))
    if len(subject) <= max_length:
        return subject

    subject = _finish_subject(re.sub(r"\S*/([^\s/]+)", r"\1", subject))
    if len(subject) <= max_length:
        return subject

    shortened = _complete_subject(
        textwrap.shorten(subject, width=max_length, placeholder="", break_on_hyphens=False),
        subject,
        max_length,
    )
    if not shortened:
        shortened = subject[:max_length]
    return _finish_subject(shortened)


def _wrap_path_item(prefix: str, path: str, width: int) -> List[str]:
    """Wrap ``prefix + path`` at ``width``, breaking the path after a ``/``.

    Continuation lines are indented by two spaces. A single path
    component longer than a line is split wherever the line ends.
    """
    lines: List[str] = []
    current = prefix
    for part in re.findall(r"[^/]+/?|/", path):
        if len(current) + len(part) > width and current.strip():
            lines.append(current.rstrip())
            current = "  "
        while len(current) + len(part) > width:
            room = width - len(current)
            lines.append(current + part[:room])
            part = part[room:]
            current = "  "
        current += part
    lines.append(current)
    return lines


def build_body(group: ChangeGroup, width: int = BODY_WRAP_WIDTH) -> Optional[str]:
    """Describe the members of a multi-file group; None for single files."""
    if len(group.members) < 2:
        return None

    location = group.scope or "the repository root"
    intro = textwrap.fill(
        f"{CATEGORY_LABELS[group.category]} changes across {len(group.members)} files in {location}.",
        width=width,
    )
    items: List[str] = []
    for member in group.members:
        items.extend(_wrap_path_item(f"- {member.status.value} ", member.path, width))
    return intro + "\n\n" + "\n".join(items)


def build_commit_message(group: ChangeGroup) -> CommitMessage:
    """Generate the commit message for ``group``."""
    return CommitMessage(subject=build_subject(group.summary), body=build_body(group))
