"""
Decide which release-note label a pull request should have.

Authors put their release note in a fenced block in the pull request
description::

    ```release-note
    Adds feature X.
    ```

or under a "Release note**:" heading from the pull request template.  A
note of "NONE" means no note is needed.  Maintainers can also declare that
no note is needed with a ``/release-note-none`` comment.
"""

import enum
import re
from typing import Iterable, Optional

from prbot_webhooks.labels import (
    DEPRECATION_LABEL,
    RELEASE_NOTE,
    RELEASE_NOTE_ACTION_REQUIRED,
    RELEASE_NOTE_LABEL_NEEDED,
    RELEASE_NOTE_NONE,
    LabelSet,
)
from prbot_webhooks.types import CommentDict


class ReleaseNoteCategory(enum.Enum):
    """
    The release-note state of a pull request.
    """
    NEEDED = "needed"
    NONE = "none"
    ACTION_REQUIRED = "action-required"
    HAS_NOTE = "has-note"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS = {
    ReleaseNoteCategory.NEEDED: RELEASE_NOTE_LABEL_NEEDED,
    ReleaseNoteCategory.NONE: RELEASE_NOTE_NONE,
    ReleaseNoteCategory.ACTION_REQUIRED: RELEASE_NOTE_ACTION_REQUIRED,
    ReleaseNoteCategory.HAS_NOTE: RELEASE_NOTE,
}

NOTE_MATCHER_RE = re.compile(
    r"(?:Release note\*\*:\s*(?:<!--[^<>]*-->\s*)?```(?:release-note)?|```release-note)(.+?)```",
    re.DOTALL | re.IGNORECASE,
)
NONE_RE = re.compile(r"^\W*none\W*$", re.IGNORECASE)
RELEASE_NOTE_NONE_COMMAND_RE = re.compile(r"^/release-note-none\s*$", re.IGNORECASE | re.MULTILINE)

ACTION_REQUIRED_NOTE = "action required"


def get_release_note(body: Optional[str]) -> str:
    """
    Find the release note in a pull request description.

    Only the first release-note block counts.  An unterminated block is no
    block at all.

    Returns:
        The stripped text of the note, or "" if there isn't one.
    """
    match = NOTE_MATCHER_RE.search(body or "")
    if match is None:
        return ""
    return match[1].strip()


def is_none_note(note: str) -> bool:
    """Is this note just "NONE", maybe with punctuation around it?"""
    return bool(NONE_RE.match(note))


def has_none_command(text: Optional[str]) -> bool:
    """Does this comment text have a /release-note-none command on a line of its own?"""
    return bool(RELEASE_NOTE_NONE_COMMAND_RE.search(text or ""))


def contains_none_command(comments: Iterable[CommentDict]) -> bool:
    """Do any of these comments have a /release-note-none command?"""
    return any(has_none_command(comment.get("body")) for comment in comments)


def classify_release_note(
    body: Optional[str],
    labels: LabelSet,
    has_none_comment: bool = False,
) -> ReleaseNoteCategory:
    """
    Decide the release-note category for a pull request.

    Arguments:
        body: the pull request description.
        labels: the labels currently on the pull request.
        has_none_comment: True if a /release-note-none command was found in
            the comments.  It only matters when the description has no note
            and there's no deprecation label, so callers can wait for
            `needs_comment_history` before reading the comments.

    """
    note = get_release_note(body).lower()
    is_none = is_none_note(note)
    has_deprecation = DEPRECATION_LABEL in labels

    if (not note or is_none) and has_deprecation:
        return ReleaseNoteCategory.NEEDED
    if not note:
        if has_none_comment:
            return ReleaseNoteCategory.NONE
        return ReleaseNoteCategory.NEEDED
    if is_none:
        return ReleaseNoteCategory.NONE
    if ACTION_REQUIRED_NOTE in note:
        return ReleaseNoteCategory.ACTION_REQUIRED
    return ReleaseNoteCategory.HAS_NOTE


def needs_comment_history(category: ReleaseNoteCategory, labels: LabelSet) -> bool:
    """
    Could a /release-note-none comment change this category?
    """
    return category == ReleaseNoteCategory.NEEDED and DEPRECATION_LABEL not in labels
