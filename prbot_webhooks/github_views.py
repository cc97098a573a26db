"""
These are the views that process webhook events coming from Github.
"""

import logging

from flask import current_app as app
from flask import Blueprint, jsonify, request

from prbot_webhooks.info import get_bot_username
from prbot_webhooks.tasks.github import (
    check_block_status_task,
    issue_comment_event_task,
    process_pull_request_task,
    pull_request_event_task,
    rescan_repository,
    rescan_repository_task,
)
from prbot_webhooks.utils import (
    SignatureInvalid,
    queue_task,
    requires_auth,
    sentry_extra_context,
    verify_signature,
)

github_bp = Blueprint('github_views', __name__)
logger = logging.getLogger(__name__)


@github_bp.route('/hook-receiver', methods=('POST',))
def hook_receiver():
    """
    Process incoming GitHub webhook events.

    1.  Make sure the payload hashes to the proper signature. If not,
        reject the request with http status of 403.
    2.  Send a job to the queue with details of the event.
    3.  Respond with http status 202.

    Returns:
        A response, or Tuple[str, int]: Message payload and HTTP status code
    """
    signature = request.headers.get("X-Hub-Signature")
    secret = app.config.get('GITHUB_WEBHOOKS_SECRET')
    try:
        verify_signature(signature, request.get_data(), secret)
    except SignatureInvalid as exc:
        msg = f"Rejecting because signature doesn't match! ({exc.__class__.__name__})"
        logger.info(msg)
        return msg, 403

    event_type = request.headers.get("X-GitHub-Event", "")
    event = request.get_json()

    action = event.get("action")
    repo = event.get("repository", {}).get("full_name")
    who = event.get("sender", {}).get("login", "someone")
    logger.info(f"Incoming GitHub event: {event_type=!r}, {repo=!r}, {action=!r}, {who=!r}")

    sentry_extra_context({"event_type": event_type, "event": event})

    match event_type:
        case "ping":
            logger.info(f"ping from {repo}")
            return "PONG"

        case "pull_request":
            return handle_pull_request_event(event)

        case "issue_comment":
            return handle_comment_event(event)

        case _:
            logger.info(f"Unsupported event type {event_type!r} from {repo}")
            return f"Unsupported event type: {event_type}", 501


# Actions on pull requests that we'll act on.
PR_ACTIONS = {
    "opened",
    "edited",
    "reopened",
    "labeled",
}

def handle_pull_request_event(event):
    """
    Handle a webhook event about a pull request.

    Label work is only needed for some actions, but any of them (a push, a
    label removed) can change the merge gate, so the others still get a
    merge gate check.
    """
    pr_number = event["pull_request"]["number"]
    repo = event["repository"]["full_name"]
    action = event["action"]

    pr_activity = f"{repo} #{pr_number} {action!r}"
    if action in PR_ACTIONS:
        logger.info(f"{pr_activity}, processing...")
        return queue_task(pull_request_event_task, event)
    else:
        logger.info(f"{pr_activity}, checking the merge gate...")
        return queue_task(check_block_status_task, repo, pr_number)


def handle_comment_event(event):
    """Handle a webhook event about a comment."""

    match event:
        case {"comment": {"user": {"login": who}}} if who == get_bot_username():
            # When the bot comments on a pull request, it causes an event, which
            # gets sent to webhooks, including us.  We don't have to do anything
            # for our own comment events.
            pass

        case {"action": "deleted"}:
            pass

        case {"issue": {"pull_request": _}}:
            return queue_task(issue_comment_event_task, event)

    return "No thanks", 202


@github_bp.route("/rescan", methods=("POST",))
@requires_auth
def rescan():
    """
    Re-process every open pull request in a repository.

    This is the reason every handler must be idempotent: it could run many
    times over the same pull request.
    """
    repo = request.form.get("repo", "")
    if not repo:
        resp = jsonify({"error": "Repo required"})
        resp.status_code = 400
        return resp
    inline = bool(request.form.get("inline", False))
    dry_run = bool(request.form.get("dry_run", False))

    if inline:
        return jsonify(rescan_repository(repo, dry_run=dry_run))
    else:
        return queue_task(rescan_repository_task, repo, dry_run)


@github_bp.route("/process_pr", methods=("POST",))
@requires_auth
def process_pr():
    """
    Process (or re-process) a pull request.
    """
    repo = request.form.get("repo", "")
    if not repo:
        resp = jsonify({"error": "Pull request repo required"})
        resp.status_code = 400
        return resp
    num = request.form.get("number")
    if not num:
        resp = jsonify({"error": "Pull request number required"})
        resp.status_code = 400
        return resp
    return queue_task(process_pull_request_task, repo, int(num))
