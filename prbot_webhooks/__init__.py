"""
A GitHub bot that keeps pull request labels and merge gates up to date.
"""

import contextlib
import logging
import os
import sys
import traceback

from celery import Celery
from flask import Flask
from flask_sslify import SSLify
import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.flask import FlaskIntegration
from werkzeug.middleware.proxy_fix import ProxyFix

from prbot_webhooks.config import get_config

__version__ = "0.1.0"

log_level = os.environ.get("LOGLEVEL", "INFO").upper()
logger = logging.getLogger(__name__)
logger.setLevel(log_level)
if not logger.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setLevel(log_level)
    logger.addHandler(_handler)

celery = Celery(strict_typing=False)


def create_app(config=None):
    """
    Make the webhook receiver app.

    `config` names a class in prbot_webhooks.config.  Without one, the
    PRBOT_WEBHOOKS_CONFIG environment variable decides.
    """
    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app)   # type: ignore[method-assign]
    app.config.from_object(get_config(config or os.environ.get("PRBOT_WEBHOOKS_CONFIG")))

    create_celery_app(app)
    if not app.debug:
        SSLify(app)

    from .github_views import github_bp
    from .tasks import tasks as tasks_bp
    app.register_blueprint(github_bp, url_prefix="/github")
    app.register_blueprint(tasks_bp, url_prefix="/tasks")
    return app


def create_celery_app(app=None, config="worker"):
    """
    Bind the module-level Celery instance to a Flask app.

    Tasks run inside the app context, so templates and config are available
    to the label handlers.  Tasks queued from a view also get a request
    context rebuilt from the view's WSGI environ, for building URLs.
    """
    if os.environ.get("SENTRY_DSN", ""):
        sentry_sdk.init(integrations=[CeleryIntegration(), FlaskIntegration()])

    app = app or create_app(config=config)
    celery.main = app.import_name
    celery.conf.update(app.config)

    class ContextTask(celery.Task): # type: ignore[name-defined]
        def __call__(self, *args, **kwargs):
            wsgi_environ = kwargs.pop("wsgi_environ", None)
            try:
                with contextlib.ExitStack() as stack:
                    stack.enter_context(app.app_context())
                    if wsgi_environ:
                        stack.enter_context(app.request_context(wsgi_environ))
                    return self.run(*args, **kwargs)
            except Exception:
                # The traceback is more useful from /tasks/status than a
                # pickled exception.
                return traceback.format_exc()

    celery.Task = ContextTask
    return celery
