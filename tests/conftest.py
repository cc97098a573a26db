"""Automatically run by pytest to set up test infrastructure."""

import pytest
import requests_mock

import prbot_webhooks
import prbot_webhooks.utils

from . import settings as test_settings
from .fake_github import FakeGitHub


@pytest.fixture
def requests_mocker():
    """Make requests_mock available as a fixture."""
    mocker = requests_mock.Mocker(real_http=False, case_sensitive=True)
    mocker.start()
    try:
        yield mocker
    finally:
        mocker.stop()


def pytest_addoption(parser):
    parser.addoption(
        "--percent-404",
        action="store",
        help="What percent of HTTP requests should fail with a 404",
        default="0",
    )


@pytest.fixture(autouse=True)
def settings_for_tests(mocker):
    for name, value in vars(test_settings).items():
        if name.isupper():
            mocker.patch(f"prbot_webhooks.settings.{name}", value)

@pytest.fixture
def fake_github(pytestconfig, mocker, requests_mocker):
    fraction_404 = float(pytestconfig.getoption("percent_404")) / 100.0
    the_fake_github = FakeGitHub(login="webhook-bot", fraction_404=fraction_404)
    the_fake_github.install_mocks(requests_mocker)
    if fraction_404:
        # Make the retry sleep a no-op so it won't slow the tests.
        mocker.patch("prbot_webhooks.utils.retry_sleep", lambda x: None)
    return the_fake_github


@pytest.fixture
def app():
    """A Flask app configured for testing."""
    return prbot_webhooks.create_app(config="testing")


@pytest.fixture(autouse=True)
def configure_flask_app(app):
    """
    Needed to make the app understand it's running under HTTPS, and have Flask
    initialized properly.
    """
    with app.test_request_context('/', base_url="https://prbot-webhooks.example.com"):
        yield


@pytest.fixture
def client(app):
    """A test client that talks to the app over HTTPS."""
    return app.test_client()


@pytest.fixture
def queued_block_checks(mocker):
    """Catch the merge gate checks that tasks queue, instead of sending them to Celery."""
    return mocker.patch("prbot_webhooks.tasks.github.check_block_status_task.delay")


@pytest.fixture(autouse=True)
def reset_all_memoized_functions():
    """Clears the values cached by @memoize before each test. Applied automatically."""
    prbot_webhooks.utils.clear_memoized_values()
