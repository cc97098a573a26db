"""
Create authenticated sessions for access to GitHub.
"""

import requests
from urlobject import URLObject

from prbot_webhooks import settings


class BaseUrlSession(requests.Session):
    """
    A requests Session for one API host: URLs are relative to `base_url`.

    Full URLs (like those in Link headers for pagination) are used as is.
    """
    def __init__(self, base_url):
        super().__init__()
        self.base_url = URLObject(base_url)

    def request(self, method, url, *args, **kwargs):
        return super().request(method, self.base_url.relative(url), *args, **kwargs)


def get_github_session():
    """
    Get the GitHub session to use, in an easily test-patchable way.
    """
    session = BaseUrlSession(base_url="https://api.github.com")
    session.headers["Authorization"] = f"token {settings.GITHUB_PERSONAL_TOKEN}"
    session.headers["Accept"] = "application/vnd.github+json"
    session.trust_env = False   # prevent reading the local .netrc
    return session
