"""
Flask and Celery configuration, chosen by name.
"""

import os


def _redis_url():
    url = os.environ.get("REDIS_TLS_URL") or os.environ.get("REDIS_URL", "redis://")
    if url.startswith("rediss"):
        # Hosted redis over TLS uses self-signed certs.
        url += "?ssl_cert_reqs=none"
    return url


class DefaultConfig:
    GITHUB_WEBHOOKS_SECRET = os.environ.get("GITHUB_WEBHOOKS_SECRET")
    CELERY_ACCEPT_CONTENT = ["json"]
    CELERY_TASK_SERIALIZER = "json"
    CELERY_RESULT_SERIALIZER = "json"

    def __init__(self):
        self.BROKER_URL = self.CELERY_RESULT_BACKEND = _redis_url()


class WorkerConfig(DefaultConfig):
    CELERY_IMPORTS = ("prbot_webhooks.tasks.github",)


class DevelopmentConfig(DefaultConfig):
    DEBUG = True


class TestingConfig(DefaultConfig):
    TESTING = True
    GITHUB_WEBHOOKS_SECRET = "testing-webhook-secret"


CONFIGS = {
    "default": DefaultConfig,
    "worker": WorkerConfig,
    "development": DevelopmentConfig,
    "testing": TestingConfig,
}


def get_config(name=None):
    """Make the config object called `name`, "default" if no name is given."""
    try:
        return CONFIGS[(name or "default").lower()]()
    except KeyError:
        raise ValueError(f"Unknown config {name!r}, expected one of {sorted(CONFIGS)}") from None
