''' Catalog generation jobs: submit + status polling (internal ops surface) '''

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.orchestration.catalog_generation.job_queue import build_job_queue
from app.services.catalog.catalog_submission import get_job_status, submit_catalog_job
from app.services.catalog.errors import ProductValidationError
from app.services.catalog.product_records import Platform


logger = logging.getLogger(__name__)


router = APIRouter(prefix="/catalog-jobs", tags=["catalog-jobs"])


class CatalogJobRequest(BaseModel):
    owner_id: str = Field(..., min_length=1, max_length=64)
    name: str | None = None
    products: List[Dict[str, Any]] = Field(default_factory=list)


# overridden in tests
def get_job_queue():
    return build_job_queue()



''' submit: 202 + job id, or 400 with the validation errors (no job created) '''
@router.post("/{platform}", status_code=status.HTTP_202_ACCEPTED)
def submit_job(
    platform: Platform,
    body: CatalogJobRequest,
    db: Session = Depends(get_db),
    queue=Depends(get_job_queue),
):
    try:
        result = submit_catalog_job(
            db,
            products=body.products,
            platform=platform,
            owner_id=body.owner_id,
            requested_name=body.name,
            queue=queue,
        )
    except ProductValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"ok": False, "message": "Product validation failed", **e.result.to_dict()},
        )

    return {"ok": True, **result.to_dict()}



@router.get("/{job_id}")
def job_status(job_id: str, db: Session = Depends(get_db)):
    view = get_job_status(db, job_id)
    if view is None:
        raise HTTPException(status_code=404, detail="job not found")
    return view
