from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, JSONDocument


class CatalogStatus(str):
    DRAFT = "draft"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"



"""
  Catalog: the finished, owner-visible collection of enriched products.
  The pipeline creates it in "processing" and flips it to "completed" together
  with product_refs / total_products in one transaction.
"""
class Catalog(Base):

    __tablename__ = "catalogs"

    id:            Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id:      Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    name:          Mapped[str] = mapped_column(String(255), nullable=False)
    platform:      Mapped[str] = mapped_column(String(16), nullable=False)
    product_model: Mapped[str] = mapped_column(String(32), nullable=False)     # WooCommerceProduct | ShopifyProduct
    status:        Mapped[str] = mapped_column(String(16), nullable=False, default=CatalogStatus.DRAFT)

    # ordered product ids, same order as the submitted rows
    product_refs:   Mapped[List[str]] = mapped_column(JSONDocument, nullable=False, default=list)
    total_products: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    products: Mapped[List["CatalogProduct"]] = relationship(
        "CatalogProduct",
        back_populates="catalog",
        cascade="all, delete-orphan",
        order_by="CatalogProduct.position",
    )



'''
  Enriched product rows
  data keeps the full-fidelity record (every original column + AI columns)
'''
class CatalogProduct(Base):

    __tablename__ = "catalog_products"

    id:           Mapped[str] = mapped_column(String(36), primary_key=True)
    catalog_id:   Mapped[str] = mapped_column(
        String(36),
        ForeignKey("catalogs.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    platform:     Mapped[str] = mapped_column(String(16), nullable=False)
    position:     Mapped[int] = mapped_column(Integer, nullable=False)
    identity_key: Mapped[Optional[str]] = mapped_column(String(255))        # SKU (WooCommerce) / Handle (Shopify)
    data:         Mapped[dict] = mapped_column(JSONDocument, nullable=False)

    ai_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    generated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    catalog: Mapped[Catalog] = relationship("Catalog", back_populates="products")

    __table_args__ = (
        Index("idx_catalog_products_catalog_position", "catalog_id", "position"),
    )
