"""
The bot makes comments on pull requests. This is stuff needed to do it well.
"""

from enum import Enum
from typing import List

from flask import render_template

from prbot_webhooks import settings
from prbot_webhooks.labels import (
    CUSTOM_LABELS,
    DEPRECATION_LABEL,
    RELEASE_NOTE_LABEL_NEEDED,
    RELEASE_NOTE_NONE,
)
from prbot_webhooks.types import CommentEvent


class BotComment(Enum):
    """
    Comments the bot can leave on pull requests.

    The value is written into the comment as a hidden marker.
    """
    RELEASE_NOTE_NEEDED = "release_note_needed"
    RELEASE_NOTE_DEPRECATION = "release_note_deprecation"
    RELEASE_NOTE_NONE_NOT_ALLOWED = "release_note_none_not_allowed"
    RELEASE_NOTE_NOT_EMPTY = "release_note_not_empty"
    RELEASE_NOTE_NONE_DEPRECATION = "release_note_none_deprecation"
    LABELS_NOT_ALLOWED = "labels_not_allowed"
    LABEL_ERRORS = "label_errors"


def is_comment_kind(kind: BotComment, text: str) -> bool:
    """
    Is this `text` a comment of this `kind`?
    """
    return f"<!-- comment:{kind.value} -->" in text


def _about_bot() -> str:
    return f"I understand the commands that are listed [here]({settings.COMMAND_HELP_URL})."


def format_simple_response(kind: BotComment, user: str, message: str) -> str:
    """
    A comment addressed to `user` that needs no more explanation.
    """
    return render_template(
        "simple_response.md.j2",
        kind=kind.value,
        user=user,
        message=message,
        about_bot=_about_bot(),
    )


def format_comment_response(kind: BotComment, comment: CommentEvent, message: str) -> str:
    """
    A reply to a comment, quoting the comment it responds to.
    """
    quoted = "\n".join(">" + line for line in comment.body.split("\n"))
    return render_template(
        "comment_response.md.j2",
        kind=kind.value,
        user=comment.author,
        message=message,
        comment_url=comment.html_url,
        quoted=quoted,
        about_bot=_about_bot(),
    )


def release_note_needed_comment(user: str) -> str:
    message = (
        f'Adding the "{RELEASE_NOTE_LABEL_NEEDED}" label because no release-note block was detected, '
        + f"please follow our [release note process]({settings.RELEASE_NOTE_PROCESS_URL}) to remove it."
    )
    return format_simple_response(BotComment.RELEASE_NOTE_NEEDED, user, message)


def release_note_deprecation_comment(user: str) -> str:
    message = (
        f'Adding the "{RELEASE_NOTE_LABEL_NEEDED}" label and removing any existing '
        + f'"{RELEASE_NOTE_NONE}" label because there is a "{DEPRECATION_LABEL}" label on the PR.'
    )
    return format_simple_response(BotComment.RELEASE_NOTE_DEPRECATION, user, message)


def release_note_none_not_allowed_comment(comment: CommentEvent) -> str:
    message = (
        f"you can only set the release note label to {RELEASE_NOTE_NONE} "
        + "if you are the PR author or an org member."
    )
    return format_comment_response(BotComment.RELEASE_NOTE_NONE_NOT_ALLOWED, comment, message)


def release_note_not_empty_comment(comment: CommentEvent) -> str:
    message = (
        f"you can only set the release note label to {RELEASE_NOTE_NONE} "
        + 'if the release-note block in the PR body text is empty or "none".'
    )
    return format_comment_response(BotComment.RELEASE_NOTE_NOT_EMPTY, comment, message)


def release_note_none_deprecation_comment(comment: CommentEvent) -> str:
    message = (
        f"you can't set the release note label to {RELEASE_NOTE_NONE} "
        + f'because there is a "{DEPRECATION_LABEL}" label on the PR. '
        + "A deprecation needs a release note in the PR body text."
    )
    return format_comment_response(BotComment.RELEASE_NOTE_NONE_DEPRECATION, comment, message)


def labels_not_allowed_comment(comment: CommentEvent) -> str:
    message = "you can only change labels if you are the PR author or an org member."
    return format_comment_response(BotComment.LABELS_NOT_ALLOWED, comment, message)


def label_errors_comment(
    comment: CommentEvent,
    invalid: List[str],
    missing_in_repo: List[str],
    not_on_issue: List[str],
) -> str:
    """
    Explain every label command in `comment` that couldn't be applied.
    """
    problems = []
    if invalid:
        problems.append(
            f"The label(s) `{', '.join(invalid)}` cannot be applied. "
            + f"These labels are supported: `{', '.join(CUSTOM_LABELS)}`"
        )
    if missing_in_repo:
        problems.append(
            f"The label(s) `{', '.join(missing_in_repo)}` cannot be applied, "
            + "because the repository doesn't have them"
        )
    if not_on_issue:
        problems.append(f"Those labels are not set on the issue: `{', '.join(not_on_issue)}`")
    return format_comment_response(BotComment.LABEL_ERRORS, comment, "\n\n".join(problems))
