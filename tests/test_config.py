"""Tests of config.py"""

import pytest

from prbot_webhooks import config as prbot_config
from prbot_webhooks.config import get_config


def test_get_config_by_name():
    assert isinstance(get_config("testing"), prbot_config.TestingConfig)
    assert isinstance(get_config("Worker"), prbot_config.WorkerConfig)
    assert type(get_config()) is prbot_config.DefaultConfig


def test_get_config_unknown():
    with pytest.raises(ValueError, match="Unknown config 'production'"):
        get_config("production")


@pytest.mark.parametrize("env, url", [
    ({}, "redis://"),
    ({"REDIS_URL": "redis://cache:6379/0"}, "redis://cache:6379/0"),
    (
        {"REDIS_URL": "redis://cache:6379/0", "REDIS_TLS_URL": "rediss://secure:6380"},
        "rediss://secure:6380?ssl_cert_reqs=none",
    ),
])
def test_redis_urls(monkeypatch, env, url):
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("REDIS_TLS_URL", raising=False)
    for name, value in env.items():
        monkeypatch.setenv(name, value)
    config = get_config("worker")
    assert config.BROKER_URL == url
    assert config.CELERY_RESULT_BACKEND == url
