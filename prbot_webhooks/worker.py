"""
This file only exists because celery can't take a factory function as the
application instance:

  $ celery --app=prbot_webhooks.worker worker
"""

from prbot_webhooks import create_celery_app

application = create_celery_app(config="worker")
