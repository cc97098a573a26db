"""
Queuable background tasks to do the bot's work.
"""

import contextlib
import traceback
from typing import Dict, List, Optional

from prbot_webhooks import celery
from prbot_webhooks.info import get_pull_request, list_open_pull_requests
from prbot_webhooks.tasks import logger
from prbot_webhooks.tasks.actions import DryRunLabelingActions, LabelingActions
from prbot_webhooks.tasks.pr_labels import (
    check_block_status,
    fix_branch_label,
    fix_labels_from_commands,
    fix_release_note_label,
    fix_release_note_none_command,
)
from prbot_webhooks.types import (
    CommentEvent,
    EventDict,
    PrDict,
    PrId,
    PullRequestContext,
    event_prid,
)
from prbot_webhooks.utils import sentry_extra_context

# Pull request actions that can change the release note.
RELEASE_NOTE_ACTIONS = {"opened", "reopened", "edited", "labeled"}

# Pull request actions that can change the branch kind label.
BRANCH_ACTIONS = {"opened", "edited"}


class _HandlerErrors:
    """
    Run independent handlers so that one failing doesn't stop the others.
    """
    def __init__(self):
        self.exceptions: List[Exception] = []

    @contextlib.contextmanager
    def isolated(self, what: str):
        try:
            yield
        except Exception as exc:    # pylint: disable=broad-exception-caught
            logger.exception(f"Couldn't {what}")
            self.exceptions.append(exc)

    def raise_errors(self, prid) -> None:
        if self.exceptions:
            raise ExceptionGroup(f"Encountered {len(self.exceptions)} errors handling {prid}", self.exceptions)


def queue_block_status_check(prid: Optional[PrId]) -> None:
    """Ask for the merge gate to be re-checked after label changes."""
    if prid is None:
        return
    logger.info(f"Queuing a merge gate check for {prid}")
    check_block_status_task.delay(prid.full_name, prid.number)


@celery.task(bind=True)
def pull_request_event_task(_, event):
    """A bound Celery task to call pull_request_event."""
    try:
        return pull_request_event(event)
    except Exception:
        logger.exception("Couldn't pull_request_event_task")
        raise
    finally:
        queue_block_status_check(event_prid(event))


def pull_request_event(event: EventDict, actions=None) -> Dict:
    """
    Process a pull_request webhook event.

    The release-note label and the branch kind label are handled
    independently: a failure in one is raised only after the other has run.

    This must be idempotent: rescans call it again for pull requests that
    have already been processed.
    """
    pr = PullRequestContext.from_event(event)
    action = event["action"]
    actions = actions or LabelingActions(pr.prid)
    sentry_extra_context({"pull_request": str(pr.prid), "action": action})
    logger.info(f"Processing {pr.prid} {action!r} by @{pr.author}...")

    result: Dict = {"pr": str(pr.prid), "release_note": None, "kind_label": None}
    errors = _HandlerErrors()
    if action in RELEASE_NOTE_ACTIONS:
        with errors.isolated(f"set the release-note label on {pr.prid}"):
            category = fix_release_note_label(pr, actions)
            if category is not None:
                result["release_note"] = category.label
    if action in BRANCH_ACTIONS:
        with errors.isolated(f"set the branch label on {pr.prid}"):
            result["kind_label"] = fix_branch_label(pr, actions)
    errors.raise_errors(pr.prid)
    return result


@celery.task(bind=True)
def issue_comment_event_task(_, event):
    """A bound Celery task to call issue_comment_event."""
    try:
        return issue_comment_event(event)
    except Exception:
        logger.exception("Couldn't issue_comment_event_task")
        raise
    finally:
        queue_block_status_check(event_prid(event))


def issue_comment_event(event: EventDict, actions=None) -> Dict:
    """
    Process an issue_comment webhook event: the comment commands.
    """
    comment = CommentEvent.from_event(event)
    actions = actions or LabelingActions(comment.prid)
    sentry_extra_context({"pull_request": str(comment.prid), "comment": comment.html_url})
    logger.info(f"Processing comment by @{comment.author} on {comment.prid} ({comment.action})")

    result: Dict = {"pr": str(comment.prid), "release_note_none": False, "added": [], "removed": []}
    errors = _HandlerErrors()
    with errors.isolated(f"handle /release-note-none on {comment.prid}"):
        result["release_note_none"] = fix_release_note_none_command(comment, actions)
    with errors.isolated(f"handle label commands on {comment.prid}"):
        plan = fix_labels_from_commands(comment, actions)
        if plan is not None:
            result["added"] = plan.to_add
            result["removed"] = plan.to_remove
    errors.raise_errors(comment.prid)
    return result


@celery.task(bind=True)
def check_block_status_task(_, repo, number):
    """A bound Celery task to call check_block_status."""
    prid = PrId(repo, number)
    try:
        status = check_block_status(prid, LabelingActions(prid))
    except Exception:
        logger.exception("Couldn't check_block_status_task")
        raise
    return status.as_json() if status else None


def reprocess_pull_request(pr: PrDict, actions=None) -> Dict:
    """
    Bring a pull request fully up to date, as if it had just been edited.

    Used by the admin endpoints, where no webhook event triggered the work.
    """
    event = {"action": "edited", "pull_request": pr, "repository": pr["base"]["repo"]}
    prid = PrId(pr["base"]["repo"]["full_name"], pr["number"])
    actions = actions or LabelingActions(prid)
    result = pull_request_event(event, actions=actions)
    status = check_block_status(prid, actions)
    result["merge_status"] = status.as_json() if status else None
    return result


@celery.task(bind=True)
def process_pull_request_task(_, repo, number):
    """A bound Celery task to re-process one pull request."""
    try:
        return reprocess_pull_request(get_pull_request(PrId(repo, number)))
    except Exception:
        logger.exception("Couldn't process_pull_request_task")
        raise


@celery.task(bind=True)
def rescan_repository_task(task, repo, dry_run):
    """A bound Celery task to call rescan_repository."""
    task.update_state(state="STARTED", meta={"repo": repo})
    return rescan_repository(repo, dry_run)


def rescan_repository(repo: str, dry_run: bool = False) -> Dict:
    """
    Re-process all the open pull requests in a repo.

    Arguments:
        dry_run (bool): if True, don't write to GitHub. Put names of action
            methods and their arguments into the "dry_run_actions" key of the
            return value.

    """
    sentry_extra_context({"repo": repo})

    processed: Dict[int, Dict] = {}
    errors: Dict[int, str] = {}
    dry_run_actions = {}

    pull_request: PrDict
    for pull_request in list_open_pull_requests(repo):
        number = pull_request["number"]
        actions = DryRunLabelingActions() if dry_run else None
        try:
            # Listed pull requests are brief, get the full description.
            full_pr = get_pull_request(PrId(repo, number))
            processed[number] = reprocess_pull_request(full_pr, actions=actions)
        except Exception:       # pylint: disable=broad-except
            errors[number] = traceback.format_exc()
        else:
            if dry_run:
                assert actions is not None
                dry_run_actions[number] = actions.action_calls

    logger.info(f"Rescanned {len(processed)} pull requests on {repo}, {len(errors)} errors")

    info: Dict = {
        "repo": repo,
        "processed": processed,
        "errors": errors,
    }
    if dry_run_actions:
        info["dry_run_actions"] = dry_run_actions
    return info
