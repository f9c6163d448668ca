# Celery app for the catalog generation worker

from celery import Celery
from kombu import Exchange, Queue
from app.core.config import settings
from app.core.logging import configure_logging

configure_logging()


'''
Celery app / instance
   - API process: only enqueues (producer)
   - Worker: 1 process, concurrency=1, consuming the catalog_generation queue
'''
celery_app = Celery(
    "catalog_forge",
    broker=settings.CELERY_BROKER_URL,          # queue location (Redis)
    backend=settings.CELERY_RESULT_BACKEND,     # result store (Redis)
    include=[
        "app.orchestration.catalog_generation.catalog_job_task",     # catalog generation jobs
    ],
)


'''
  Common Celery config
'''
celery_app.conf.update(
    timezone=settings.CELERY_TIMEZONE,
    enable_utc=True,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    broker_connection_retry_on_startup=True,
    # === one job in flight: a Job/Catalog is never touched by two workers ===
    worker_concurrency=1,
    worker_prefetch_multiplier=1,    # a worker takes one message at a time
    task_acks_late=True,             # ack after the job finished; a crashed worker hands the message back
    broker_heartbeat=30,
    broker_pool_limit=10,
    result_expires=24 * 3600,
)


celery_app.conf.task_queues = (
    Queue("default", Exchange("default"), routing_key="default"),
    Queue(settings.CATALOG_QUEUE_NAME, Exchange(settings.CATALOG_QUEUE_NAME), routing_key=settings.CATALOG_QUEUE_NAME),
)
celery_app.conf.task_default_queue = "default"


'''
routing: catalog jobs only go to the dedicated queue, start the worker with
    celery -A app.core.celery_app worker -Q catalog_generation -c 1
'''
celery_app.conf.task_routes = {
    "app.orchestration.catalog_generation.catalog_job_task.process_catalog_job": {
        "queue": settings.CATALOG_QUEUE_NAME,
    },
}
