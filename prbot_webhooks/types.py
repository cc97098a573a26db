"""Types specific to prbot_webhooks."""

from __future__ import annotations

import dataclasses
from typing import Dict, Optional

from prbot_webhooks.labels import LabelSet

# A pull request (or issue) as described by a JSON object.
PrDict = Dict

# An issue comment as described by a JSON object.
CommentDict = Dict

# A whole webhook payload.
EventDict = Dict


@dataclasses.dataclass(frozen=True)
class PrId:
    """An id of a pull request, with a repo full_name and a number."""
    full_name: str
    number: int

    def __str__(self):
        return f"{self.full_name}#{self.number}"

    @property
    def org(self):
        org, _, _ = self.full_name.partition("/")
        return org


@dataclasses.dataclass(frozen=True)
class PullRequestContext:
    """
    A snapshot of a pull request as one webhook delivery saw it.

    Comment events describe the pull request as an issue, which has no
    branch, so that is empty there.
    """
    org: str
    repo: str
    number: int
    author: str
    body: str
    state: str
    labels: LabelSet
    branch: str = ""
    html_url: str = ""

    @classmethod
    def from_event(cls, event: EventDict) -> PullRequestContext:
        """Build the context from a pull_request or issue_comment payload."""
        repository = event["repository"]
        pr = event.get("pull_request") or event["issue"]
        head = pr.get("head") or {}
        return cls(
            org=repository["owner"]["login"],
            repo=repository["name"],
            number=pr["number"],
            author=pr["user"]["login"],
            body=pr.get("body") or "",
            state=pr["state"],
            labels=LabelSet.from_json(pr.get("labels", [])),
            branch=head.get("ref", ""),
            html_url=pr.get("html_url", ""),
        )

    @property
    def prid(self) -> PrId:
        return PrId(f"{self.org}/{self.repo}", self.number)

    @property
    def is_closed(self) -> bool:
        return self.state == "closed"


@dataclasses.dataclass(frozen=True)
class CommentEvent:
    """An issue_comment webhook delivery."""
    author: str
    body: str
    action: str
    html_url: str
    is_pull_request: bool
    pull_request: PullRequestContext

    @classmethod
    def from_event(cls, event: EventDict) -> CommentEvent:
        comment = event["comment"]
        return cls(
            author=comment["user"]["login"],
            body=comment.get("body") or "",
            action=event["action"],
            html_url=comment.get("html_url", ""),
            is_pull_request="pull_request" in event["issue"],
            pull_request=PullRequestContext.from_event(event),
        )

    @property
    def prid(self) -> PrId:
        return self.pull_request.prid


def event_prid(event: EventDict) -> Optional[PrId]:
    """The pull request an event is about, or None for plain issues."""
    if "pull_request" in event:
        number = event["pull_request"]["number"]
    elif "pull_request" in event.get("issue", {}):
        number = event["issue"]["number"]
    else:
        return None
    return PrId(event["repository"]["full_name"], number)
