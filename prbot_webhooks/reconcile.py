"""
Converge the labels on a pull request toward what we want, with as few API
calls as possible.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Iterable, List, Protocol

from prbot_webhooks.labels import LabelSet

logger = logging.getLogger(__name__)


class LabelActions(Protocol):
    """The label changes a reconciler needs to be able to make."""

    def add_labels(self, *, labels: List[str]) -> None:
        ...

    def remove_label(self, *, label: str) -> None:
        ...


class LabelReconciler:
    """
    Make label changes on one pull request.

    `labels` is the current set of labels on the pull request.  It's updated
    as changes are made, so that after reconciling it shows the labels the
    pull request should have, without reading them again.

    A failed change doesn't stop the others.  Failures are collected, and
    `raise_errors` raises them all at once.
    """

    def __init__(self, labels: LabelSet, actions: LabelActions) -> None:
        self.labels = labels
        self.actions = actions
        self.exceptions: List[Exception] = []

    @contextlib.contextmanager
    def saved_exceptions(self):
        """
        A context manager to wrap around each remote change.

        An exception raised in the with-block will be added to `self.exceptions`.
        """
        try:
            yield
        except Exception as exc:    # pylint: disable=broad-exception-caught
            logger.error(f"Label change failed: {exc}")
            self.exceptions.append(exc)

    def add(self, label: str) -> None:
        """Add a label if it isn't already there."""
        if label in self.labels:
            return
        with self.saved_exceptions():
            self.actions.add_labels(labels=[label])
        self.labels.add(label)

    def remove(self, label: str) -> None:
        """Remove a label if it's there."""
        if label not in self.labels:
            return
        with self.saved_exceptions():
            self.actions.remove_label(label=self.labels.get(label, label))
        self.labels.discard(label)

    def set_exclusive(self, desired: str, group: Iterable[str]) -> None:
        """
        Make `desired` the only label from `group` on the pull request.
        """
        self.add(desired)
        for label in group:
            if label.lower() != desired.lower():
                self.remove(label)

    def apply(self, to_add: Iterable[str], to_remove: Iterable[str]) -> None:
        """Add and remove labels."""
        for label in to_add:
            self.add(label)
        for label in to_remove:
            self.remove(label)

    def raise_errors(self) -> None:
        if self.exceptions:
            raise ExceptionGroup(
                f"Encountered {len(self.exceptions)} errors setting labels", self.exceptions
            )
