"""
The merge gate: a commit status that stays pending while blocking labels
are on a pull request.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from prbot_webhooks import settings
from prbot_webhooks.labels import BLOCKING_LABELS, LabelSet

MERGE_ALLOWED_DESCRIPTION = "Merged allowed."


@dataclass(frozen=True)
class MergeStatus:
    """A commit status for the merge gate."""
    state: str
    description: str

    def as_json(self) -> Dict[str, str]:
        """The payload for GitHub's create-a-commit-status API."""
        return {
            "context": settings.MERGE_STATUS_CONTEXT,
            "state": self.state,
            "description": self.description,
        }


def blocking_labels_present(labels: LabelSet) -> List[str]:
    """
    Get the blocking labels on a pull request, in BLOCKING_LABELS order.
    """
    return [label for label in BLOCKING_LABELS if label in labels]


def merge_block_status(labels: LabelSet, pr_state: str = "open") -> Optional[MergeStatus]:
    """
    Compute the merge gate status for a pull request.

    Closed pull requests are never gated again: this returns None for them.
    """
    if pr_state == "closed":
        return None

    blocking = blocking_labels_present(labels)
    if not blocking:
        return MergeStatus("success", MERGE_ALLOWED_DESCRIPTION)
    if len(blocking) == 1:
        return MergeStatus("pending", f"Should not have {blocking[0]} label.")
    return MergeStatus("pending", f"Should not have {', '.join(blocking)} labels.")
