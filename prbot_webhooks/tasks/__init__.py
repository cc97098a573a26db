"""
Helpers for Celery tasks.
"""

from celery.utils.log import get_task_logger
from flask import Blueprint, jsonify

from prbot_webhooks import celery, log_level
from prbot_webhooks.utils import requires_auth


# Set up Celery logging.
logger = get_task_logger(__name__)
logger.setLevel(log_level)

# Task status for the responses of queued work.
tasks = Blueprint('tasks', __name__)

@tasks.route('/status/<task_id>')
@requires_auth
def status(task_id):
    result = celery.AsyncResult(task_id)
    return jsonify({
        "status": result.state,
        "info": result.info,
    })

