"""Tests of merge_gate.py"""

import pytest

from prbot_webhooks.labels import LabelSet
from prbot_webhooks.merge_gate import (
    MERGE_ALLOWED_DESCRIPTION,
    MergeStatus,
    blocking_labels_present,
    merge_block_status,
)


def test_no_blocking_labels():
    status = merge_block_status(LabelSet(["kind/bug", "release-note"]))
    assert status == MergeStatus("success", MERGE_ALLOWED_DESCRIPTION)
    assert status.description == "Merged allowed."


def test_one_blocking_label():
    status = merge_block_status(LabelSet(["do-not-merge/work-in-progress"]))
    assert status == MergeStatus("pending", "Should not have do-not-merge/work-in-progress label.")


def test_wip_and_do_not_merge():
    status = merge_block_status(LabelSet(["do-not-merge", "WIP"]))
    assert status == MergeStatus("pending", "Should not have WIP, do-not-merge labels.")


def test_blocking_labels_are_found_in_scan_order():
    labels = LabelSet([
        "release-note-action-required",
        "do-not-merge/release-note-label-needed",
        "wip",
        "do-not-merge/awaiting-submitter-action",
    ])
    assert blocking_labels_present(labels) == [
        "WIP",
        "do-not-merge/awaiting-submitter-action",
        "do-not-merge/release-note-label-needed",
        "release-note-action-required",
    ]


@pytest.mark.parametrize("labels", [
    [],
    ["WIP"],
    ["WIP", "do-not-merge", "do-not-merge/awaiting-PR"],
])
def test_merge_block_status_is_repeatable(labels):
    assert merge_block_status(LabelSet(labels)) == merge_block_status(LabelSet(labels))


def test_closed_pull_requests_are_not_gated():
    assert merge_block_status(LabelSet(["WIP"]), pr_state="closed") is None


def test_status_json():
    status = MergeStatus("pending", "Should not have WIP label.")
    assert status.as_json() == {
        "context": "blocker",
        "state": "pending",
        "description": "Should not have WIP label.",
    }
