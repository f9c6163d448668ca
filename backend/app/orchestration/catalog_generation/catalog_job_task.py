
from __future__ import annotations
import logging
from typing import Any, Dict

from celery import shared_task

from app.core.logging import configure_logging
from app.orchestration.catalog_generation.catalog_job_runner import CatalogJobRunner
from app.orchestration.catalog_generation.job_queue import JobPayload


configure_logging()
logger = logging.getLogger(__name__)



"""
Worker entry point for one catalog generation job.
    - max_retries=0: a job gets one attempt, retry means a new submission
    - errors are recorded on the job by the runner, never re-raised into Celery retries
    - a redelivered message (acks_late) finds the job already claimed and is skipped
"""
@shared_task(name="app.orchestration.catalog_generation.catalog_job_task.process_catalog_job",
             bind=True, max_retries=0, acks_late=True)
def process_catalog_job(self, payload: Dict[str, Any]):

    job = JobPayload.from_dict(payload)
    logger.info("========  process_catalog_job start job=%s platform=%s rows=%d  ========",
                job.job_id, job.platform, len(job.products))

    result = CatalogJobRunner.from_settings().run(job)

    logger.info("======== process_catalog_job end job=%s status=%s ========", job.job_id, result.get("status"))
    return result
