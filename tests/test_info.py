"""
Tests of the functions in info.py
"""

import pytest

from prbot_webhooks.info import (
    get_bot_username,
    get_issue_labels,
    get_pull_request,
    is_org_member,
    list_issue_comments,
    list_open_pull_requests,
    list_repo_labels,
)
from prbot_webhooks.types import PrId
from prbot_webhooks.utils import RemoteReadFailure


def test_get_bot_username(fake_github):
    assert get_bot_username() == "webhook-bot"
    assert get_bot_username() == "webhook-bot"
    # It's memoized.
    assert len(fake_github.requests_made("/user")) == 1


def test_pull_request_reads(fake_github):
    pr = fake_github.make_pull_request(labels=["WIP", "kind/bug"], ref="fix/it")
    pr.add_comment(user="someone", body="Nice")
    prid = PrId("an-org/a-repo", pr.number)
    assert get_pull_request(prid)["head"]["ref"] == "fix/it"
    assert get_issue_labels(prid) == {"wip", "kind/bug"}
    assert [c["body"] for c in list_issue_comments(prid)] == ["Nice"]
    assert "release-note-none" in list_repo_labels("an-org/a-repo")


def test_labels_are_never_cached(fake_github):
    pr = fake_github.make_pull_request(labels=["WIP"])
    prid = PrId("an-org/a-repo", pr.number)
    assert get_issue_labels(prid) == {"WIP"}
    pr.set_labels([])
    assert get_issue_labels(prid) == set()


def test_list_open_pull_requests(fake_github):
    repo = fake_github.make_repo("an-org", "a-repo")
    repo.make_pull_request(number=5)
    repo.make_pull_request(number=6, state="closed")
    assert [prj["number"] for prj in list_open_pull_requests("an-org/a-repo")] == [5]


def test_is_org_member(fake_github):
    fake_github.add_org_member("an-org", "maintainer")
    assert is_org_member("an-org", "maintainer")
    assert is_org_member("an-org", "Maintainer")
    assert not is_org_member("an-org", "stranger")
    assert not is_org_member("other-org", "maintainer")


def test_membership_check_failure(requests_mocker):
    requests_mocker.get("https://api.github.com/orgs/an-org/memberships/someone", status_code=502)
    with pytest.raises(RemoteReadFailure):
        is_org_member("an-org", "someone")


def test_pending_membership_is_not_membership(requests_mocker):
    requests_mocker.get(
        "https://api.github.com/orgs/an-org/memberships/someone",
        json={"state": "pending"},
    )
    assert not is_org_member("an-org", "someone")
