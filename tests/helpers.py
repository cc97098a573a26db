"""Helpers for tests."""

import hmac
import json
import re
from hashlib import sha1


def check_good_markdown(text: str) -> None:
    """
    Make some checks of Markdown text.

    These are meant to catch mistakes in templates or code producing Markdown.

    Returns:
        Nothing.  Will raise an exception with a failure message if something
        is wrong.
    """
    if text.startswith((" ", "\n", "\t")):
        raise ValueError(f"Markdown shouldn't start with whitespace: {text!r}")

    # HTML comments must be on a line by themselves or the Markdown won't
    # render properly.
    if re.search(".<!--", text):
        raise ValueError(f"Markdown shouldn't have an HTML comment in the middle of a line: {text!r}")
    if re.search("-->.", text):
        raise ValueError(f"Markdown shouldn't have an HTML comment with following text: {text!r}")

    # We should never link to something called "None".
    if re.search(r"\[None\]\(", text):
        raise ValueError(f"Markdown has a link to None: {text!r}")

    # We should never link to a url with None as a component.
    if re.search(r"\]\([^)]*/None[/)]", text):
        raise ValueError(f"Markdown has a link to a None url: {text!r}")


def sign_payload(payload: bytes, secret: str = "testing-webhook-secret") -> str:
    """Make the X-Hub-Signature header GitHub would send for `payload`."""
    return "sha1=" + hmac.new(secret.encode(), msg=payload, digestmod=sha1).hexdigest()


def post_event(client, event_type: str, event: dict, signature: str | None = None):
    """
    Deliver a webhook event to the app, signed like GitHub would sign it.
    """
    payload = json.dumps(event).encode()
    headers = {
        "X-GitHub-Event": event_type,
        "X-Hub-Signature": signature if signature is not None else sign_payload(payload),
    }
    return client.post(
        "/github/hook-receiver",
        data=payload,
        headers=headers,
        content_type="application/json",
        base_url="https://prbot-webhooks.example.com",
    )
