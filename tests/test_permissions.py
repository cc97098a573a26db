"""Tests of permissions.py"""

import pytest

from prbot_webhooks.permissions import can_change_labels, is_author, normalize_login


def never_a_member(org, user):
    return False


def must_not_be_called(org, user):
    raise AssertionError("Membership shouldn't be checked")


@pytest.mark.parametrize("login, normalized", [
    ("someone", "someone"),
    ("@SomeOne", "someone"),
    ("Some@One", "some@one"),
])
def test_normalize_login(login, normalized):
    assert normalize_login(login) == normalized


def test_is_author():
    assert is_author("SomeOne", "@someone")
    assert not is_author("someone", "someone-else")


def test_author_can_change_labels():
    assert can_change_labels("@Author", "author", "an-org", must_not_be_called)


def test_user_owned_repo():
    assert can_change_labels("Owner", "someone", "owner", must_not_be_called)


def test_org_member_can_change_labels():
    calls = []
    def is_member(org, user):
        calls.append((org, user))
        return True
    assert can_change_labels("maintainer", "someone", "an-org", is_member)
    assert calls == [("an-org", "maintainer")]


def test_stranger_cannot_change_labels():
    assert not can_change_labels("stranger", "someone", "an-org", never_a_member)
