"""
Keep the labels and merge gate of a pull request in line with its contents.

Each function here reads the current state from GitHub, decides what
should change, and makes the changes through an actions object
(LabelingActions, or DryRunLabelingActions for dry runs).  All of them are
safe to run any number of times for the same pull request.
"""

from __future__ import annotations

from typing import Optional

from prbot_webhooks.bot_comments import (
    label_errors_comment,
    labels_not_allowed_comment,
    release_note_deprecation_comment,
    release_note_needed_comment,
    release_note_none_deprecation_comment,
    release_note_none_not_allowed_comment,
    release_note_not_empty_comment,
)
from prbot_webhooks.branches import classify_branch
from prbot_webhooks.commands import LabelChangePlan, parse_commands, plan_label_changes
from prbot_webhooks.info import (
    get_issue_labels,
    get_pull_request,
    is_org_member,
    list_issue_comments,
    list_repo_labels,
)
from prbot_webhooks.labels import (
    DEPRECATION_LABEL,
    RELEASE_NOTE_LABEL_NEEDED,
    RELEASE_NOTE_LABELS,
    RELEASE_NOTE_NONE,
)
from prbot_webhooks.merge_gate import MergeStatus, merge_block_status
from prbot_webhooks.permissions import can_change_labels
from prbot_webhooks.reconcile import LabelReconciler
from prbot_webhooks.release_notes import (
    ReleaseNoteCategory,
    classify_release_note,
    contains_none_command,
    has_none_command,
    needs_comment_history,
)
from prbot_webhooks.tasks import logger
from prbot_webhooks.types import CommentEvent, PrId, PullRequestContext
from prbot_webhooks.utils import RequestFailed


def _post_comment(actions, comment_body: str) -> None:
    """Comment on the pull request.  A failure is logged, and doesn't stop anything else."""
    try:
        actions.add_comment_to_pull_request(comment_body=comment_body)
    except RequestFailed:
        logger.exception("Couldn't add a comment")


def fix_release_note_label(pr: PullRequestContext, actions) -> Optional[ReleaseNoteCategory]:
    """
    Give the pull request the one release-note label its description calls for.

    Closed pull requests keep whatever label they had.

    Returns the category decided on, or None if nothing was considered.
    """
    if pr.is_closed:
        logger.info(f"{pr.prid} is closed, leaving its release-note label alone")
        return None

    labels = get_issue_labels(pr.prid)
    category = classify_release_note(pr.body, labels)

    if category == ReleaseNoteCategory.NEEDED:
        if needs_comment_history(category, labels):
            if contains_none_command(list_issue_comments(pr.prid)):
                category = classify_release_note(pr.body, labels, has_none_comment=True)
            elif RELEASE_NOTE_LABEL_NEEDED not in labels:
                _post_comment(actions, release_note_needed_comment(pr.author))
        elif RELEASE_NOTE_LABEL_NEEDED not in labels:
            _post_comment(actions, release_note_deprecation_comment(pr.author))

    logger.info(f"{pr.prid} release note is {category.value!r}")
    reconciler = LabelReconciler(labels, actions)
    reconciler.set_exclusive(category.label, RELEASE_NOTE_LABELS)
    reconciler.raise_errors()
    return category


def fix_branch_label(pr: PullRequestContext, actions) -> Optional[str]:
    """
    Add the kind label for the pull request's branch name, if it has one.

    The label is created in the repo first if the repo doesn't have it yet.

    Returns the name of the kind label, or None.
    """
    spec = classify_branch(pr.branch)
    if spec is None:
        return None

    labels = get_issue_labels(pr.prid)
    if spec.name in labels:
        return spec.name

    reconciler = LabelReconciler(labels, actions)
    if spec.name not in list_repo_labels(pr.prid.full_name):
        with reconciler.saved_exceptions():
            actions.create_label(**spec.as_json())
    reconciler.add(spec.name)
    reconciler.raise_errors()
    return spec.name


def fix_release_note_none_command(comment: CommentEvent, actions) -> bool:
    """
    Handle a /release-note-none command in a new pull request comment.

    Returns True if the release-note label was set to release-note-none.
    """
    if not comment.is_pull_request or comment.action != "created":
        return False
    if not has_none_command(comment.body):
        return False

    pr = comment.pull_request
    if pr.is_closed:
        logger.info(f"{pr.prid} is closed, ignoring /release-note-none")
        return False

    logger.info(f"@{comment.author} asked for {RELEASE_NOTE_NONE} on {pr.prid}")
    if not can_change_labels(comment.author, pr.author, pr.org, is_org_member):
        _post_comment(actions, release_note_none_not_allowed_comment(comment))
        return False

    labels = get_issue_labels(pr.prid)
    if DEPRECATION_LABEL in labels:
        logger.info(f"{pr.prid} is a deprecation, it keeps needing a release note")
        _post_comment(actions, release_note_none_deprecation_comment(comment))
        return False

    # A real note in the description wins over the command.
    category = classify_release_note(pr.body, labels)
    if category in (ReleaseNoteCategory.HAS_NOTE, ReleaseNoteCategory.ACTION_REQUIRED):
        _post_comment(actions, release_note_not_empty_comment(comment))
        return False

    reconciler = LabelReconciler(labels, actions)
    reconciler.set_exclusive(RELEASE_NOTE_NONE, RELEASE_NOTE_LABELS)
    reconciler.raise_errors()
    return True


def fix_labels_from_commands(comment: CommentEvent, actions) -> Optional[LabelChangePlan]:
    """
    Apply the label commands in a pull request comment.

    Commands that can't be applied are explained in one reply comment.

    Returns the changes that were planned, or None if the comment had no
    label commands we could act on.
    """
    if comment.action == "deleted" or not comment.is_pull_request:
        return None

    parsed = parse_commands(comment.body)
    if not parsed:
        return None

    pr = comment.pull_request
    if not can_change_labels(comment.author, pr.author, pr.org, is_org_member):
        _post_comment(actions, labels_not_allowed_comment(comment))
        return None

    repo_labels = list_repo_labels(pr.prid.full_name)
    labels = get_issue_labels(pr.prid)
    plan = plan_label_changes(parsed.commands, repo_labels, labels)

    reconciler = LabelReconciler(labels, actions)
    reconciler.apply(plan.to_add, plan.to_remove)

    if parsed.invalid or plan.missing_in_repo or plan.not_on_issue:
        logger.info(
            f"Label commands on {pr.prid} not applied: invalid={parsed.invalid}, "
            + f"missing={plan.missing_in_repo}, not on issue={plan.not_on_issue}"
        )
        _post_comment(
            actions,
            label_errors_comment(comment, parsed.invalid, plan.missing_in_repo, plan.not_on_issue),
        )

    reconciler.raise_errors()
    return plan


def check_block_status(prid: PrId, actions) -> Optional[MergeStatus]:
    """
    Set the merge gate status on the head commit of a pull request.

    Everything is read fresh, so running this again after any change (or a
    duplicate delivery) settles on the right status.

    Returns the status set, or None for closed pull requests.
    """
    logger.debug(f"Checking if {prid} needs a merge blocker")
    pr = get_pull_request(prid)
    labels = get_issue_labels(prid)
    status = merge_block_status(labels, pr["state"])
    if status is None:
        logger.info(f"{prid} is closed, not setting a merge status")
        return None

    actions.set_status(sha=pr["head"]["sha"], status=status.as_json())
    return status
