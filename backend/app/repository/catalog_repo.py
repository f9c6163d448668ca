
# catalogs / catalog_products tables

from __future__ import annotations
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.model.catalog import Catalog, CatalogProduct, CatalogStatus



'''
Placeholder catalog in "processing", created once batching starts.
flush only: the caller commits it together with the job link.
'''
def create_catalog_placeholder(
    db: Session,
    *,
    owner_id: str,
    name: str,
    platform: str,
    product_model: str,
) -> Catalog:
    catalog = Catalog(
        id=str(uuid.uuid4()),
        owner_id=owner_id,
        name=name,
        platform=platform,
        product_model=product_model,
        status=CatalogStatus.PROCESSING,
        product_refs=[],
        total_products=0,
    )
    db.add(catalog)
    db.flush()
    return catalog



"""
   Insert the enriched products in submission order and flip the catalog to completed.
   No commit here: the runner commits this together with complete_job(), so the
   catalog is never visible half-populated.
"""
def finalize_catalog(
    db: Session,
    catalog: Catalog,
    *,
    products: Sequence[Dict[str, Any]],
    identity_keys: Sequence[Optional[str]],
    generated_at: datetime,
) -> List[str]:
    if len(products) != len(identity_keys):
        raise ValueError("products and identity_keys must have the same length")

    rows = [
        CatalogProduct(
            id=str(uuid.uuid4()),
            catalog_id=catalog.id,
            platform=catalog.platform,
            position=pos,
            identity_key=(ident or None),
            data=data,
            ai_generated=True,
            generated_at=generated_at,
        )
        for pos, (data, ident) in enumerate(zip(products, identity_keys))
    ]
    db.add_all(rows)

    refs = [r.id for r in rows]
    catalog.product_refs = refs
    catalog.total_products = len(refs)
    catalog.status = CatalogStatus.COMPLETED
    db.add(catalog)
    db.flush()
    return refs



# failure path: the placeholder stays around, flagged, never "completed"
def mark_catalog_error(db: Session, catalog_id: str) -> None:
    catalog = db.get(Catalog, catalog_id)
    if catalog is None or catalog.status == CatalogStatus.COMPLETED:
        return
    catalog.status = CatalogStatus.ERROR
    db.add(catalog)
    db.commit()


def get_catalog(db: Session, catalog_id: str) -> Optional[Catalog]:
    return db.get(Catalog, catalog_id)


def list_catalog_products(db: Session, catalog_id: str) -> List[CatalogProduct]:
    stmt = (
        select(CatalogProduct)
        .where(CatalogProduct.catalog_id == catalog_id)
        .order_by(CatalogProduct.position.asc())
    )
    return list(db.scalars(stmt))
