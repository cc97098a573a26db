"""Tests of branches.py"""

import pytest

from prbot_webhooks.branches import classify_branch


@pytest.mark.parametrize("branch, label", [
    ("feat/new-thing", "kind/feature"),
    ("fix/crash", "kind/bug"),
    ("test/more-coverage", "kind/test"),
    ("chore/bump-deps", "kind/chore"),
    ("refactor/simplify", "kind/refactor"),
    ("docs/readme", "kind/documentation"),
    # The convention can appear anywhere in the name.
    ("someone/fix/crash", "kind/bug"),
    # The first entry in the table wins.
    ("feat/fix/both", "kind/feature"),
    ("fix/feat/both", "kind/feature"),
    ("main", None),
    ("fixes-without-slash", None),
    ("", None),
    (None, None),
])
def test_classify_branch(branch, label):
    spec = classify_branch(branch)
    if label is None:
        assert spec is None
    else:
        assert spec.name == label
        assert spec.description
        assert len(spec.color) == 6
