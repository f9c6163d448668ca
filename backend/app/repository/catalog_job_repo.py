
# catalog_jobs table: job lifecycle queued -> processing -> completed | failed

from __future__ import annotations
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.db.model.catalog_job import CatalogJob, JobStatus
from app.services.catalog.errors import JobStateError
from app.utils.clock import now_utc



'''
Create the job (queued) and commit. Called once by the submitter; afterwards only the worker writes this row.
'''
def create_job(
    db: Session,
    *,
    owner_id: str,
    platform: str,
    total_products: int,
    catalog_name: Optional[str] = None,
) -> CatalogJob:
    job = CatalogJob(
        id=str(uuid.uuid4()),
        owner_id=owner_id,
        platform=platform,
        status=JobStatus.QUEUED,
        progress=0,
        total_products=total_products,
        processed_products=0,
        catalog_name=catalog_name,
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def get_job(db: Session, job_id: str) -> Optional[CatalogJob]:
    return db.get(CatalogJob, job_id)



"""
   queued -> processing as one conditional UPDATE.
   False when the job is missing, already claimed or terminal: a redelivered
   message (acks_late) must not run the same job twice.
"""
def claim_job(db: Session, job_id: str) -> bool:
    res = db.execute(
        update(CatalogJob)
        .where(CatalogJob.id == job_id, CatalogJob.status == JobStatus.QUEUED)
        .values(status=JobStatus.PROCESSING, started_at=now_utc(), progress=0, processed_products=0)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return res.rowcount == 1



def link_catalog(db: Session, job: CatalogJob, catalog_id: str) -> None:
    _ensure_processing(job)
    job.catalog_id = catalog_id
    db.add(job)



# after every merged batch; small commit so pollers see progress right away
def update_job_progress(db: Session, job: CatalogJob, *, progress: int, processed_products: int) -> None:
    _ensure_processing(job)
    job.progress = max(0, min(100, int(progress)))
    job.processed_products = int(processed_products)
    db.add(job)
    db.commit()



"""
   Mark completed. Does NOT commit: it is part of the finalization
   transaction together with the products and the catalog flip.
"""
def complete_job(db: Session, job: CatalogJob, *, catalog_id: str, processed_products: int) -> None:
    _ensure_processing(job)
    job.status = JobStatus.COMPLETED
    job.progress = 100
    job.processed_products = int(processed_products)
    job.result = {"catalog_id": catalog_id}
    job.error = None
    job.completed_at = now_utc()
    db.add(job)



def fail_job(db: Session, job_id: str, error: str) -> CatalogJob:
    job = db.get(CatalogJob, job_id)
    if job is None:
        raise JobStateError(f"Job not found: {job_id}")
    if job.status in JobStatus.TERMINAL:
        raise JobStateError(f"Job {job_id} is already {job.status}")
    job.status = JobStatus.FAILED
    job.error = error or "Unknown error"
    job.completed_at = now_utc()
    db.add(job)
    db.commit()
    return job



def _ensure_processing(job: CatalogJob) -> None:
    if job.status != JobStatus.PROCESSING:
        raise JobStateError(f"Job {job.id} is {job.status}, expected {JobStatus.PROCESSING}")



# ---------- status view (polling) ----------
def job_status_view(job: CatalogJob) -> Dict[str, Any]:
    return {
        "job_id": job.id,
        "platform": job.platform,
        "status": job.status,
        "progress": job.progress,
        "total_products": job.total_products,
        "processed_products": job.processed_products,
        "catalog_name": job.catalog_name,
        "result": job.result if job.status == JobStatus.COMPLETED else None,
        "error": job.error if job.status == JobStatus.FAILED else None,
        "created_at": _iso(job.created_at),
        "started_at": _iso(job.started_at),
        "completed_at": _iso(job.completed_at),
    }


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None
