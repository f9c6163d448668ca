from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, JSONDocument


class JobStatus(str):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    TERMINAL = frozenset({COMPLETED, FAILED})



"""
  Catalog generation job
  one row per submission; written by the submitter once (queued) and afterwards
  only by the worker processing it
"""
class CatalogJob(Base):

    __tablename__ = "catalog_jobs"

    id:       Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    platform: Mapped[str] = mapped_column(String(16), nullable=False)                  # woocommerce | shopify
    status:   Mapped[str] = mapped_column(String(16), nullable=False, default=JobStatus.QUEUED)

    # progress accounting
    progress:           Mapped[int] = mapped_column(Integer, nullable=False, default=0)     # 0..100
    total_products:     Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processed_products: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    catalog_name: Mapped[Optional[str]] = mapped_column(String(255))
    catalog_id:   Mapped[Optional[str]] = mapped_column(String(36))        # placeholder catalog, set once batching starts
    result:       Mapped[Optional[dict]] = mapped_column(JSONDocument)      # {"catalog_id": ...} once completed
    error:        Mapped[Optional[str]] = mapped_column(Text)

    created_at:   Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    started_at:   Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    updated_at:   Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (Index("idx_catalog_job_status", "status", "created_at"),)

    def __repr__(self) -> str:
        return f"<CatalogJob {self.id} {self.status} {self.progress}%>"
