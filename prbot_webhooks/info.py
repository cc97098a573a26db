"""
Get information about pull requests, labels, comments and people from GitHub.

Nothing about a pull request is cached here: every webhook delivery reads
the current state, because GitHub is the only record of it.
"""

import logging
from typing import Dict, Iterable

from prbot_webhooks.auth import get_github_session
from prbot_webhooks.labels import LabelSet
from prbot_webhooks.types import CommentDict, PrDict, PrId
from prbot_webhooks.utils import (
    log_check_response,
    memoize,
    paginated_get,
    retry_get,
)

logger = logging.getLogger(__name__)


@memoize
def github_whoami() -> Dict:
    self_resp = retry_get(get_github_session(), "/user")
    log_check_response(self_resp)
    return self_resp.json()


def get_bot_username() -> str:
    """What is the username of the bot?"""
    me = github_whoami()
    return me["login"]


def get_pull_request(prid: PrId) -> PrDict:
    """Get the full description of a pull request."""
    resp = retry_get(get_github_session(), f"/repos/{prid.full_name}/pulls/{prid.number}")
    log_check_response(resp)
    return resp.json()


def get_issue_labels(prid: PrId) -> LabelSet:
    """Get the labels on a pull request as they are right now."""
    url = f"/repos/{prid.full_name}/issues/{prid.number}/labels"
    return LabelSet.from_json(paginated_get(url, session=get_github_session()))


def list_repo_labels(repo_fullname: str) -> LabelSet:
    """Get all the labels defined in a repo."""
    url = f"/repos/{repo_fullname}/labels"
    return LabelSet.from_json(paginated_get(url, session=get_github_session()))


def list_issue_comments(prid: PrId) -> Iterable[CommentDict]:
    """Get all the comments on a pull request."""
    url = f"/repos/{prid.full_name}/issues/{prid.number}/comments"
    return paginated_get(url, session=get_github_session())


def list_open_pull_requests(repo_fullname: str) -> Iterable[PrDict]:
    """Get the (brief) descriptions of the open pull requests in a repo."""
    url = f"/repos/{repo_fullname}/pulls?state=open"
    return paginated_get(url, session=get_github_session())


def is_org_member(org: str, user: str) -> bool:
    """
    Is `user` an active member of `org`?

    A 404 means not a member.  Any other failure is raised, since we can't
    tell either way.
    """
    resp = get_github_session().get(f"/orgs/{org}/memberships/{user}")
    if resp.status_code == 404:
        return False
    log_check_response(resp)
    return resp.json().get("state") == "active"
