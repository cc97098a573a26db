"""
The changes the bot makes on GitHub.
"""

from typing import Dict, List
from urllib.parse import quote

from prbot_webhooks.auth import get_github_session
from prbot_webhooks.tasks import logger
from prbot_webhooks.types import PrId
from prbot_webhooks.utils import log_check_response, sentry_extra_context, text_summary


class LabelingActions:
    """
    Implementation of the changes made to a pull request.

    All arguments must be JSON-serializable so that dry-runs can report on
    the actions.

    """

    def __init__(self, prid: PrId):
        self.prid = prid

    def add_labels(self, *, labels: List[str]) -> None:
        """
        Add labels to a pull request, leaving its other labels alone.
        """
        url = f"/repos/{self.prid.full_name}/issues/{self.prid.number}/labels"
        logger.info(f"Adding labels to PR {self.prid}: {labels}")
        resp = get_github_session().post(url, json={"labels": labels})
        log_check_response(resp)

    def remove_label(self, *, label: str) -> None:
        """
        Remove a label from a pull request.

        If the label is already gone, that's fine.
        """
        url = f"/repos/{self.prid.full_name}/issues/{self.prid.number}/labels/{quote(label, safe='')}"
        logger.info(f"Removing label from PR {self.prid}: {label!r}")
        resp = get_github_session().delete(url)
        if resp.status_code == 404:
            logger.info(f"Label {label!r} was already gone from PR {self.prid}")
            return
        log_check_response(resp)

    def create_label(self, *, name: str, description: str, color: str) -> None:
        """
        Create a label in the pull request's repo.

        If the label already exists, that's fine.
        """
        url = f"/repos/{self.prid.full_name}/labels"
        logger.info(f"Creating label {name!r} in {self.prid.full_name}")
        resp = get_github_session().post(
            url, json={"name": name, "description": description, "color": color},
        )
        if resp.status_code == 422:
            logger.info(f"Label {name!r} already exists in {self.prid.full_name}")
            return
        log_check_response(resp)

    def add_comment_to_pull_request(self, *, comment_body: str) -> None:
        """
        Add a comment to a pull request.
        """
        url = f"/repos/{self.prid.full_name}/issues/{self.prid.number}/comments"
        logger.info(f"Commenting on PR {self.prid}: {text_summary(comment_body, 90)!r}")
        resp = get_github_session().post(url, json={"body": comment_body})
        log_check_response(resp)

    def set_status(self, *, sha: str, status: Dict[str, str]) -> None:
        """
        Set a commit status on the head commit of the pull request.

        Arguments:
            sha: the commit to set the status on.
            status: a dict with context, state, and description as expected
                by the GitHub API:
                https://docs.github.com/en/rest/commits/statuses#create-a-commit-status
        """
        sentry_extra_context({"status": status})
        url = f"/repos/{self.prid.full_name}/statuses/{sha}"
        logger.info(f"Setting status on PR {self.prid} ({sha}): {status}")
        resp = get_github_session().post(url, json=status)
        log_check_response(resp)


class DryRunLabelingActions:
    """
    Implementation of actions for dry runs: record them, change nothing.
    """

    def __init__(self):
        self.action_calls = []

    def __getattr__(self, name):
        def fn(**kwargs):
            self.action_calls.append((name, kwargs))
        return fn
