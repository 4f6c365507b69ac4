"""
Celery configuration for background tasks
"""
from celery import Celery
import logging

from dankpos.core.config import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "dankpos",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "dankpos.modules.email.tasks",
    ]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
    worker_prefetch_multiplier=1,
    result_expires=3600,  # 1 hour
    task_routes={
        "dankpos.modules.email.tasks.*": {"queue": "email"},
    },
)

if __name__ == "__main__":
    celery_app.start()
