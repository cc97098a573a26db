"""
Label commands in pull request comments.

People can change labels by commenting with commands on lines of their own::

    /kind bug
    /priority important-soon
    /remove-kind feature
    /label kind/regression
    /remove-label priority/critical-urgent

``/kind`` and ``/priority`` take any number of values.  ``/label`` and
``/remove-label`` take exactly one label from CUSTOM_LABELS.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from prbot_webhooks.labels import CUSTOM_LABELS, LabelSet


class CommandVerb(enum.Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class Command:
    """One label change asked for in a comment."""
    verb: CommandVerb
    label: str
    # The comment line the command came from.
    raw: str


@dataclass
class ParsedCommands:
    """
    Everything found in a comment.
    """
    commands: List[Command] = field(default_factory=list)
    # Command lines asking for labels that aren't in CUSTOM_LABELS.
    invalid: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.commands or self.invalid)


COMMAND_RE = re.compile(
    r"/(?P<remove>remove-)?(?P<family>kind|priority|label)(?:\s+(?P<args>.*?))?\s*",
    re.IGNORECASE,
)

_CUSTOM_LABELS = LabelSet(CUSTOM_LABELS)


def parse_commands(body: Optional[str]) -> ParsedCommands:
    """
    Find the label commands in the text of a comment.
    """
    parsed = ParsedCommands()
    for line in (body or "").splitlines():
        line = line.rstrip()
        match = COMMAND_RE.fullmatch(line)
        if match is None:
            continue
        verb = CommandVerb.REMOVE if match["remove"] else CommandVerb.ADD
        family = match["family"].lower()
        args = (match["args"] or "").split()
        if family == "label":
            label = _CUSTOM_LABELS.get(args[0]) if len(args) == 1 else None
            if label is None:
                parsed.invalid.append(line)
            else:
                parsed.commands.append(Command(verb, label, line))
        else:
            for arg in args:
                parsed.commands.append(Command(verb, f"{family}/{arg.lower()}", line))
    return parsed


@dataclass
class LabelChangePlan:
    """
    The label changes to make for a set of commands.
    """
    to_add: List[str] = field(default_factory=list)
    to_remove: List[str] = field(default_factory=list)
    # Labels the commands asked for that the repo doesn't have.
    missing_in_repo: List[str] = field(default_factory=list)
    # Labels the commands asked to remove that aren't on the pull request.
    not_on_issue: List[str] = field(default_factory=list)


def _append_once(names: List[str], name: str) -> None:
    if name.lower() not in (n.lower() for n in names):
        names.append(name)


def plan_label_changes(
    commands: Iterable[Command],
    repo_labels: LabelSet,
    issue_labels: LabelSet,
) -> LabelChangePlan:
    """
    Decide which commands can be applied.

    Adding a label that's already there, or removing one that isn't, needs
    no API call.  Labels are spelled the way the repo spells them.
    """
    plan = LabelChangePlan()
    for command in commands:
        label = command.label
        if command.verb == CommandVerb.ADD:
            if label in issue_labels:
                continue
            repo_label = repo_labels.get(label)
            if repo_label is None:
                _append_once(plan.missing_in_repo, label)
            else:
                _append_once(plan.to_add, repo_label)
        else:
            issue_label = issue_labels.get(label)
            if issue_label is None:
                _append_once(plan.not_on_issue, label)
            elif label not in repo_labels:
                _append_once(plan.missing_in_repo, label)
            else:
                _append_once(plan.to_remove, issue_label)
    return plan
