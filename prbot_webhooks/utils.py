"""
Generic utilities.
"""

import functools
import hmac
import os
from functools import wraps
from hashlib import sha1
from time import sleep as retry_sleep   # so that we can patch it for tests.

import requests
import sentry_sdk
from flask import jsonify, request, Response, url_for
from urlobject import URLObject

from prbot_webhooks import logger


def _check_auth(username, password):
    """
    Checks if a username / password combination is valid.
    """
    return (
        username == os.environ.get('HTTP_BASIC_AUTH_USERNAME') and
        password == os.environ.get('HTTP_BASIC_AUTH_PASSWORD')
    )

def _authenticate():
    """
    Sends a 401 response that enables basic auth
    """
    return Response(
        'Could not verify your access level for that URL.\n'
        'You have to login with proper credentials', 401,
        {'WWW-Authenticate': 'Basic realm="Login Required"'}
    )

def requires_auth(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        auth = request.authorization
        if not auth or not _check_auth(auth.username, auth.password):
            return _authenticate()
        return f(*args, **kwargs)
    return decorated


class RequestFailed(Exception):
    """A request to GitHub didn't succeed."""

class RemoteReadFailure(RequestFailed):
    """Reading remote state failed. Decisions based on it must be abandoned."""

class RemoteWriteFailure(RequestFailed):
    """A change to remote state failed."""


def log_check_response(response, raise_for_status=True):
    """
    Logs HTTP request and response at debug level and checks if it succeeded.

    Arguments:
        response (requests.Response)
        raise_for_status (bool): if True, call raise_for_status on the response
            also.

    Raises:
        RemoteReadFailure for a failed GET, RemoteWriteFailure for anything
        else.
    """
    msg = "Request: {0.method} {0.url}: {0.body!r}".format(response.request)
    logger.debug(msg)
    msg = "Response: {0.status_code} {0.reason!r} for {0.url}: {0.content!r}".format(response)
    logger.debug(msg)
    if raise_for_status:
        try:
            response.raise_for_status()
        except Exception as exc:
            req = response.request
            exc_class = RemoteReadFailure if req.method == "GET" else RemoteWriteFailure
            raise exc_class(
                f"HTTP request failed: {req.method} {req.url}. Response body: {response.content}"
            ) from exc


class SignatureInvalid(Exception):
    """The webhook payload can't be trusted."""

class UnsupportedDigest(SignatureInvalid):
    """The signature header names a digest algorithm we don't accept."""

class SignatureMismatch(SignatureInvalid):
    """The payload doesn't hash to the signature."""


# GitHub's legacy X-Hub-Signature header is always HMAC-SHA1.
SUPPORTED_DIGESTS = {
    "sha1": sha1,
}


def verify_signature(signature: str | None, payload: bytes, secret: str | None) -> None:
    """
    Ensure `payload` was signed by someone who knows `secret`.

    The digest is computed over the raw request body, so this must be called
    before the payload is decoded.

    Arguments:
        signature: The X-Hub-Signature header, like ``"sha1=0123abcd..."``.
        payload: The raw request body.
        secret: The shared webhook secret.

    Raises:
        UnsupportedDigest if the header names anything other than sha1,
        SignatureMismatch if the digests differ, SignatureInvalid if there is
        no header or no secret at all.
    """
    if not secret:
        raise SignatureInvalid("No webhook secret is configured")
    if not signature:
        raise SignatureInvalid("No signature was provided")

    algorithm, _, received = signature.partition("=")
    digestmod = SUPPORTED_DIGESTS.get(algorithm)
    if digestmod is None:
        raise UnsupportedDigest(f"Unsupported signature digest: {algorithm!r}")

    expected = hmac.new(secret.encode(), msg=payload, digestmod=digestmod).hexdigest()
    if not hmac.compare_digest(expected.encode(), received.encode()):
        raise SignatureMismatch("Payload signature doesn't match")


def text_summary(text, length=40):
    """
    Make a summary of `text`, at most `length` chars long.

    The middle will be elided if needed.
    """
    if len(text) <= length:
        return text
    else:
        start = (length - 3) // 2
        end = length - 3 - start
        return text[:start] + "..." + text[-end:]


def retry_get(session, url, **kwargs):
    """
    Get a URL, but retry if it returns a 404.

    GitHub has been known to send us a pull request event, and then return a
    404 when we ask for the labels or comments on the pull request.  This
    will retry with a pause to get the real answer.

    """
    tries = 10
    while True:
        resp = session.get(url, **kwargs)
        if resp.status_code == 404:
            tries -= 1
            if tries == 0:
                break
            retry_sleep(.5)
            continue
        else:
            break
    return resp


def paginated_get(url, session=None, limit=None, per_page=100, **kwargs):
    """
    Retrieve all objects from a paginated API.

    Assumes that the pagination is specified in the "link" header, like
    Github's v3 API.

    The `limit` describes how many results you'd like returned.  You might get
    more than this, but you won't make more requests to the server once this
    limit has been exceeded.

    """
    url = URLObject(url).set_query_param('per_page', str(per_page))
    limit = limit or 999999999
    session = session or requests.Session()
    returned = 0
    while url:
        resp = retry_get(session, url, **kwargs)
        log_check_response(resp)
        for item in resp.json():
            yield item
            returned += 1
        url = None
        if resp.links and returned < limit:
            url = resp.links.get("next", {}).get("url", "")


# A list of all the memoized functions, so that `clear_memoized_values` can
# clear them all.
_memoized_functions = []

def memoize(func):
    """Cache the value returned by a function call forever."""
    func = functools.lru_cache()(func)
    _memoized_functions.append(func)
    return func

def clear_memoized_values():
    """Clear all the values saved by @memoize, to ensure isolated tests."""
    for func in _memoized_functions:
        func.cache_clear()


def minimal_wsgi_environ():
    values = {
        "HTTP_HOST", "SERVER_NAME", "SERVER_PORT", "REQUEST_METHOD",
        "SCRIPT_NAME", "PATH_INFO", "QUERY_STRING", "wsgi.url_scheme",
    }
    return {key: value for key, value in request.environ.items()
            if key in values}


def queue_task(task, *args, **kwargs):
    """
    Queue a task to run in the background via Celery.

    Returns the HTTP response to return from a view.
    """
    result = task.delay(*args, wsgi_environ=minimal_wsgi_environ(), **kwargs)
    status_url = url_for("tasks.status", task_id=result.id, _external=True)
    logger.info(f"Job status URL: {status_url}")
    resp = jsonify({"message": "queued", "status_url": status_url})
    resp.status_code = 202
    resp.headers["Location"] = status_url
    return resp


def sentry_extra_context(data_dict):
    """Apply the keys and values from data_dict to the Sentry extra context."""
    for key, value in data_dict.items():
        sentry_sdk.set_extra(key, value)
