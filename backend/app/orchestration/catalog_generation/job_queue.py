# Hand-off of job payloads from the submitter to the catalog worker

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)



@dataclass
class JobPayload:
    """Everything the worker needs; products are the normalized rows as submitted."""
    job_id: str
    owner_id: str
    platform: str
    products: List[Dict[str, Any]] = field(default_factory=list)
    catalog_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> JobPayload:
        return cls(
            job_id=str(data["job_id"]),
            owner_id=str(data["owner_id"]),
            platform=str(data["platform"]),
            products=list(data.get("products") or []),
            catalog_name=data.get("catalog_name"),
        )



'''
Durable queue: Celery on the Redis broker, dedicated catalog queue.
The worker consumes it with concurrency 1 / prefetch 1 / acks_late (see core/celery_app.py).
'''
class CeleryJobQueue:

    def __init__(self, task=None, *, queue_name: Optional[str] = None):
        if task is None:
            from app.orchestration.catalog_generation.catalog_job_task import process_catalog_job
            task = process_catalog_job
        if queue_name is None:
            from app.core.config import settings
            queue_name = settings.CATALOG_QUEUE_NAME
        self.task = task
        self.queue_name = queue_name

    def enqueue(self, payload: JobPayload) -> str:
        res = self.task.apply_async(args=[payload.to_dict()], queue=self.queue_name)
        logger.info("catalog job enqueued job=%s task=%s queue=%s", payload.job_id, res.id, self.queue_name)
        return res.id



'''
CATALOG_TASKS_INLINE=true: run the worker logic in the submitting process.
Debug / local dev only, the submit call blocks until the job is done.
'''
class InlineJobQueue:

    def __init__(self, runner):
        self.runner = runner

    def enqueue(self, payload: JobPayload) -> str:
        logger.info("catalog job running inline job=%s", payload.job_id)
        self.runner.run(payload)
        return payload.job_id



def build_job_queue():
    from app.core.config import settings

    if settings.CATALOG_TASKS_INLINE:
        from app.orchestration.catalog_generation.catalog_job_runner import CatalogJobRunner
        return InlineJobQueue(CatalogJobRunner.from_settings())
    return CeleryJobQueue()
