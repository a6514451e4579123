"""
Celery Configuration

Configures Celery with Flask integration, Redis broker, and the beat
schedule for the upload expiry sweep.
"""

import os

from celery import Celery
from kombu import Queue

CLEANUP_TASK_NAME = "watermark_backend.tasks.cleanup_expired_uploads"


class CeleryConfig:
    """Celery configuration settings."""

    # Broker settings
    broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")

    # Task settings
    task_serializer = "json"
    accept_content = ["json"]
    result_serializer = "json"
    timezone = "UTC"
    enable_utc = True

    # Worker settings
    worker_prefetch_multiplier = 1
    task_acks_late = True

    task_routes = {
        CLEANUP_TASK_NAME: {"queue": "cleanup_queue"},
    }

    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue("cleanup_queue", routing_key="cleanup"),
    )

    # Expiry sweep; records live in Redis so a restart does not lose them
    beat_schedule = {
        "cleanup-expired-uploads": {
            "task": CLEANUP_TASK_NAME,
            "schedule": float(os.getenv("CLEANUP_INTERVAL_SECONDS", 300)),
        },
    }

    task_soft_time_limit = 240
    task_time_limit = 300

    result_expires = 3600

    imports = ("watermark_backend.tasks.cleanup_task",)


def make_celery(app):
    """
    Create Celery instance with Flask app context.

    Args:
        app: Flask application instance

    Returns:
        Configured Celery instance
    """
    celery = Celery(
        app.import_name,
        backend=CeleryConfig.result_backend,
        broker=CeleryConfig.broker_url,
    )

    celery.config_from_object(CeleryConfig)

    class ContextTask(celery.Task):
        """Make celery tasks work with Flask app context."""

        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = ContextTask
    celery.set_default()
    return celery
