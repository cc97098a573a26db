"""
Who is allowed to change labels with comment commands.
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


def normalize_login(login: str) -> str:
    """GitHub logins are case-insensitive, and people like to write "@someone"."""
    return login.lower().removeprefix("@")


def is_author(pr_author: str, commenter: str) -> bool:
    """Is the commenter the author of the pull request?"""
    return normalize_login(pr_author) == normalize_login(commenter)


def can_change_labels(
    commenter: str,
    pr_author: str,
    org: str,
    is_member: Callable[[str, str], bool],
) -> bool:
    """
    Can `commenter` use label commands on a pull request by `pr_author`?

    The author of the pull request can, and so can members of the org that
    owns the repo.  A repo owned by a user (the "org" is the commenter)
    counts as the commenter's own org.

    Arguments:
        is_member: called as ``is_member(org, user)`` to check membership.
            Only called if the cheaper checks don't decide.

    """
    if is_author(pr_author, commenter):
        return True
    if normalize_login(org) == normalize_login(commenter):
        return True
    if is_member(org, commenter):
        return True
    logger.info(f"@{commenter} is neither the author nor a member of {org}")
    return False
