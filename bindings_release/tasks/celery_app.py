from celery import Celery
from bindings_release.core.config import settings

celery_app = Celery("bindings_release", broker=settings.redis_url, backend=settings.redis_url, include=["bindings_release.tasks.releases"])
# One release at a time: the worker is the lock on the target repository.
celery_app.conf.update(task_track_started=True, result_expires=3600, broker_connection_retry_on_startup=True,
                       worker_concurrency=1, worker_prefetch_multiplier=1, task_acks_late=True,)
