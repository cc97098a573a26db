"""
To properly manipulate labels, we need to know which labels are controlled
by which policy. This is that information, and the set type we use to
compare labels the way GitHub does: without regard to case.
"""

from __future__ import annotations

import dataclasses
from typing import Dict, Iterable, Iterator


class LabelSet:
    """
    The names of the labels on a pull request or in a repo.

    Membership is case-insensitive, like label names on GitHub.  The
    original spelling of each name is kept for display and API calls.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: Dict[str, str] = {}
        for name in names:
            self.add(name)

    @classmethod
    def from_json(cls, labels: Iterable[Dict]) -> LabelSet:
        """Make a LabelSet from a list of GitHub label objects."""
        return cls(lbl["name"] for lbl in labels)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LabelSet):
            return self._names.keys() == other._names.keys()
        if isinstance(other, (set, frozenset)):
            return self == LabelSet(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"LabelSet({sorted(self)!r})"

    def add(self, name: str) -> None:
        self._names.setdefault(name.lower(), name)

    def get(self, name: str, default: str | None = None) -> str | None:
        """The spelling of `name` as it appears in this set."""
        return self._names.get(name.lower(), default)

    def discard(self, name: str) -> None:
        self._names.pop(name.lower(), None)


@dataclasses.dataclass(frozen=True)
class LabelSpec:
    """A label as it should be created in a repo."""
    name: str
    description: str
    color: str

    def as_json(self) -> Dict[str, str]:
        return dataclasses.asdict(self)


# Release-note labels. Only one of them should be on a pull request at a
# time.

RELEASE_NOTE = "release-note"
RELEASE_NOTE_NONE = "release-note-none"
RELEASE_NOTE_ACTION_REQUIRED = "release-note-action-required"
RELEASE_NOTE_LABEL_NEEDED = "do-not-merge/release-note-label-needed"

RELEASE_NOTE_LABELS = [
    RELEASE_NOTE_NONE,
    RELEASE_NOTE_ACTION_REQUIRED,
    RELEASE_NOTE_LABEL_NEEDED,
    RELEASE_NOTE,
]

# A deprecation always needs a release note written by a human.
DEPRECATION_LABEL = "kind/deprecation"

# Labels that block merging.  The merge gate reports them in this order.

WIP = "WIP"
DO_NOT_MERGE = "do-not-merge"
DO_NOT_MERGE_AWAITING_PR = "do-not-merge/awaiting-PR"
DO_NOT_MERGE_AWAITING_SUBMITTER = "do-not-merge/awaiting-submitter-action"
DO_NOT_MERGE_WORK_IN_PROGRESS = "do-not-merge/work-in-progress"

BLOCKING_LABELS = [
    WIP,
    DO_NOT_MERGE,
    DO_NOT_MERGE_AWAITING_PR,
    DO_NOT_MERGE_AWAITING_SUBMITTER,
    DO_NOT_MERGE_WORK_IN_PROGRESS,
    RELEASE_NOTE_LABEL_NEEDED,
    RELEASE_NOTE_ACTION_REQUIRED,
]

# Labels anyone allowed to comment can apply with /label and /remove-label.

CUSTOM_LABELS = [
    "kind/bug",
    "kind/feature",
    "kind/cleanup",
    "kind/api-change",
    "kind/design",
    "kind/regression",
    "kind/documentation",
    "priority/critical-urgent",
    "priority/important-longterm",
    "priority/important-soon",
]

# Branch name conventions, checked in order.  The first prefix found
# anywhere in the branch name decides the kind label.

BRANCH_KIND_LABELS = [
    ("feat/", LabelSpec("kind/feature", "Categorizes issue or PR as related to a new feature.", "c7def8")),
    ("fix/", LabelSpec("kind/bug", "Categorizes issue or PR as related to a bug.", "e11d21")),
    ("test/", LabelSpec("kind/test", "Categorizes issue or PR as related to tests.", "fbca04")),
    ("chore/", LabelSpec("kind/chore", "Categorizes issue or PR as related to maintenance chores.", "c5def5")),
    ("refactor/", LabelSpec("kind/refactor", "Categorizes issue or PR as related to refactoring.", "d4c5f9")),
    ("docs/", LabelSpec("kind/documentation", "Categorizes issue or PR as related to documentation.", "0075ca")),
]
