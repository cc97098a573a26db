"""
Categorize pull requests by the name of their branch.
"""

from typing import Optional

from prbot_webhooks.labels import BRANCH_KIND_LABELS, LabelSpec


def classify_branch(branch: Optional[str]) -> Optional[LabelSpec]:
    """
    Find the kind label for a branch name like "nedbat/fix/crash-on-start".

    The conventional prefixes can appear anywhere in the name, so that
    "user/feat/thing" counts as a feature.  The first match in
    BRANCH_KIND_LABELS wins.

    Returns:
        The LabelSpec to apply, or None if the branch follows no convention.
    """
    if not branch:
        return None
    for prefix, spec in BRANCH_KIND_LABELS:
        if prefix in branch:
            return spec
    return None
