from prbot_webhooks.auth import get_github_session

from . import settings as test_settings


def test_get_github_session(fake_github):
    session = get_github_session()
    response = session.get("/user")
    headers = response.request.headers
    assert headers["Authorization"] == f"token {test_settings.GITHUB_PERSONAL_TOKEN}"
    assert response.url == "https://api.github.com/user"
