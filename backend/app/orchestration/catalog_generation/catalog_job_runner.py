from __future__ import annotations

import logging
import math
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.errors import PersistenceError
from app.db.model.catalog_job import CatalogJob
from app.integrations.openai_content import ContentGenerator, GenerationRequestError
from app.orchestration.catalog_generation.job_queue import JobPayload
from app.repository.catalog_job_repo import (
    claim_job,
    complete_job,
    fail_job,
    get_job,
    link_catalog,
    update_job_progress,
)
from app.repository.catalog_repo import (
    create_catalog_placeholder,
    finalize_catalog,
    mark_catalog_error,
)
from app.services.catalog.content_merge import merge_generated_content
from app.services.catalog.payload_optimizer import estimate_token_savings, optimize_for_generation
from app.services.catalog.product_records import (
    PRODUCT_MODEL_NAMES,
    Platform,
    dump_product,
    parse_platform,
    parse_products,
)
from app.utils.backoff import RetryPolicy
from app.utils.clock import iso_now, now_utc
from app.utils.serialization import to_jsonable

logger = logging.getLogger(__name__)


DEFAULT_BATCH_SIZE = 10



def batch_progress(done: int, total: int) -> int:
    """Percent of batches done, half rounded up (1/3 -> 33, 2/3 -> 67)."""
    if total <= 0:
        return 100
    return int(math.floor(done * 100 / total + 0.5))



"""
Drives one catalog job end to end:

    claim (queued -> processing)            skip if already claimed / terminal
    catalog placeholder (processing) + link on the job
    per batch, strictly in order:
        optimize -> cache / generate -> merge -> progress commit -> fixed pause
    one transaction: products + catalog completed + job completed

Any error: rollback, catalog -> error, job -> failed with the message.
Dependencies are injected; from_settings() wires the production ones.
"""
class CatalogJobRunner:

    def __init__(
        self,
        session_factory: Callable[[], Session],
        generator: ContentGenerator,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        pause_sec: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.session_factory = session_factory
        self.generator = generator
        self.batch_size = max(1, int(batch_size))
        self.pause_sec = max(0.0, float(pause_sec))
        self.sleep = sleep
        self.retry_policy = retry_policy or RetryPolicy()


    @classmethod
    def from_settings(cls) -> CatalogJobRunner:
        from app.core.config import settings
        from app.db.session import SessionLocal
        from app.infrastructure.cache import ContentCache

        return cls(
            SessionLocal,
            ContentGenerator.from_settings(cache=ContentCache.from_settings()),
            batch_size=settings.CATALOG_BATCH_SIZE,
            pause_sec=settings.CATALOG_BATCH_PAUSE_SEC,
            retry_policy=RetryPolicy.from_settings(),
        )


    def run(self, payload: JobPayload) -> Dict[str, Any]:
        db = self.session_factory()
        try:
            with _persisting("job claim"):
                claimed = claim_job(db, payload.job_id)
            if not claimed:
                logger.warning("job=%s not claimable (missing, running or finished), skipped", payload.job_id)
                return {"job_id": payload.job_id, "status": "skipped"}

            job = get_job(db, payload.job_id)
            logger.info("job=%s queued -> processing rows=%d", job.id, len(payload.products))

            try:
                catalog_id = self._process(db, job, payload)
            except Exception as exc:
                logger.exception("job=%s failed: %s", payload.job_id, exc)
                self._record_failure(db, payload.job_id, exc)
                return {"job_id": payload.job_id, "status": "failed", "error": str(exc)}

            logger.info("job=%s processing -> completed catalog=%s", payload.job_id, catalog_id)
            return {"job_id": payload.job_id, "status": "completed", "catalog_id": catalog_id}
        finally:
            db.close()


    def _process(self, db: Session, job: CatalogJob, payload: JobPayload) -> str:
        platform = parse_platform(payload.platform)
        records = parse_products(platform, payload.products)
        name = payload.catalog_name or f"Generated Catalog - {iso_now()}"

        # 1) placeholder catalog, linked on the job
        with _persisting("catalog placeholder"):
            catalog = create_catalog_placeholder(
                db,
                owner_id=job.owner_id,
                name=name,
                platform=platform.value,
                product_model=PRODUCT_MODEL_NAMES[platform],
            )
            link_catalog(db, job, catalog.id)
            db.commit()

        # 2) batches, one after another
        batches = [records[i:i + self.batch_size] for i in range(0, len(records), self.batch_size)]
        merged_all: List[Any] = []

        for index, batch in enumerate(batches):
            logger.info("job=%s batch=%d/%d size=%d", job.id, index + 1, len(batches), len(batch))

            payloads = optimize_for_generation(batch, platform)
            savings = estimate_token_savings([dump_product(r) for r in batch], payloads)
            logger.info(
                "job=%s batch=%d tokens original=%d optimized=%d saved=%d%%",
                job.id, index + 1, savings["original_estimate"], savings["optimized_estimate"],
                savings["saved_percentage"],
            )

            generated = self._generate(payloads, platform)
            merged = merge_generated_content(batch, generated, platform)
            merged_all.extend(merged)

            with _persisting("job progress"):
                update_job_progress(
                    db, job,
                    progress=batch_progress(index + 1, len(batches)),
                    processed_products=len(merged_all),
                )

            # fixed cooldown between batches, not after the last one
            if index < len(batches) - 1 and self.pause_sec > 0:
                self.sleep(self.pause_sec)

        # 3) products + catalog + job in one transaction
        with _persisting("catalog products"):
            finalize_catalog(
                db, catalog,
                products=[to_jsonable(dump_product(r)) for r in merged_all],
                identity_keys=[r.identity for r in merged_all],
                generated_at=now_utc(),
            )
            complete_job(db, job, catalog_id=catalog.id, processed_products=len(merged_all))
            db.commit()

        return catalog.id


    '''
      One generation call per batch. With GENERATION_MAX_ATTEMPTS > 1 only
      transient request errors are retried, with exponential backoff.
    '''
    def _generate(self, payloads: List[Dict[str, Any]], platform: Platform) -> List[Dict[str, Any]]:
        attempts = 0
        while True:
            attempts += 1
            try:
                return self.generator.generate(payloads, platform)
            except GenerationRequestError as e:
                if not (e.transient and self.retry_policy.should_retry(attempts)):
                    raise
                delay = self.retry_policy.delay_for(attempts)
                logger.warning("generation attempt %d failed (%s), retrying in %.1fs", attempts, e, delay)
                self.sleep(delay)


    def _record_failure(self, db: Session, job_id: str, exc: Exception) -> None:
        db.rollback()
        job = get_job(db, job_id)
        if job is not None and job.catalog_id:
            mark_catalog_error(db, job.catalog_id)
        fail_job(db, job_id, str(exc) or exc.__class__.__name__)
        logger.info("job=%s processing -> failed", job_id)



@contextmanager
def _persisting(what: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to persist {what}: {e}") from e
