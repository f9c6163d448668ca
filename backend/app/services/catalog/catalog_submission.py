"""
Submission side of the catalog pipeline: normalize -> validate -> create job -> enqueue.

Invalid input never becomes a job: ProductValidationError is raised before
anything is written or queued.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from app.orchestration.catalog_generation.job_queue import JobPayload
from app.repository.catalog_job_repo import create_job, fail_job, get_job, job_status_view
from app.services.catalog.errors import ProductValidationError
from app.services.catalog.product_records import Platform, parse_platform
from app.services.catalog.product_validator import ValidationIssue, summarize_issues, validate_products

logger = logging.getLogger(__name__)



@dataclass
class SubmissionResult:
    job_id: str
    status: str
    platform: str
    total_products: int
    warnings: List[ValidationIssue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "status": self.status,
            "platform": self.platform,
            "total_products": self.total_products,
            "warnings": [w.to_dict() for w in self.warnings],
        }



def submit_catalog_job(
    db: Session,
    *,
    products: Any,
    platform: Union[str, Platform],
    owner_id: str,
    requested_name: Optional[str] = None,
    queue,
) -> SubmissionResult:
    plat = parse_platform(platform)
    rows = normalize_products(products, plat)

    validation = validate_products(rows, plat)
    if not validation.valid:
        logger.info(
            "submission rejected platform=%s errors=%d: %s",
            plat.value, len(validation.errors), summarize_issues(validation.errors),
        )
        raise ProductValidationError(validation)
    if validation.warnings:
        logger.info("submission platform=%s warnings=%d (non-blocking)", plat.value, len(validation.warnings))

    name = (requested_name or "").strip() or None
    job = create_job(db, owner_id=owner_id, platform=plat.value, total_products=len(rows), catalog_name=name)

    payload = JobPayload(job_id=job.id, owner_id=owner_id, platform=plat.value, products=rows, catalog_name=name)
    try:
        queue.enqueue(payload)
    except Exception as e:
        # no consumer will ever see this job
        logger.exception("enqueue failed job=%s", job.id)
        fail_job(db, job.id, f"Failed to enqueue job: {e}")
        raise

    db.refresh(job)
    logger.info("catalog job submitted job=%s platform=%s rows=%d", job.id, plat.value, len(rows))
    return SubmissionResult(
        job_id=job.id,
        status=job.status,
        platform=plat.value,
        total_products=len(rows),
        warnings=list(validation.warnings),
    )



def get_job_status(db: Session, job_id: str) -> Optional[Dict[str, Any]]:
    job = get_job(db, job_id)
    return job_status_view(job) if job is not None else None



# ========= input normalization =========
def normalize_products(products: Any, platform: Platform) -> Any:
    """Flat, one-row-per-product list; anything that is not a list is left for the validator to reject."""
    if not isinstance(products, list):
        return products
    if platform == Platform.WOOCOMMERCE:
        return flatten_woocommerce_variations(products)
    if any(isinstance(p, dict) and isinstance(p.get("variants"), list) for p in products):
        return shopify_variants_to_rows(products)
    return products



'''
  WooCommerce parents may carry their variations nested under "variations".
  They become sibling rows right after the parent, each with Parent set
  (its own Parent, else the parent's SKU, else the parent's Name).
'''
def flatten_woocommerce_variations(products: List[Any]) -> List[Any]:
    rows: List[Any] = []
    for product in products:
        nested = product.get("variations") if isinstance(product, dict) else None
        if not isinstance(nested, list) or not nested:
            rows.append(product)
            continue

        parent = {k: v for k, v in product.items() if k != "variations"}
        rows.append(parent)
        parent_ref = parent.get("SKU") or parent.get("Name")
        for variation in nested:
            row = dict(variation) if isinstance(variation, dict) else {}
            row["Parent"] = row.get("Parent") or parent_ref
            rows.append(row)

    if len(rows) != len(products):
        logger.info("flattened woocommerce products: %d -> %d rows", len(products), len(rows))
    return rows



'''
  Shopify API shape (handle/title/options/variants/images) -> CSV rows,
  one row per variant. Image i goes to variant i, falling back to the first image.
'''
def shopify_variants_to_rows(products: List[Any]) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for product in products:
        if not isinstance(product, dict):
            continue
        variants = product.get("variants") or [{}]
        images = product.get("images") or []
        options = product.get("options") or []
        seo = product.get("seo") or {}
        tags = product.get("tags")

        for index, variant in enumerate(variants):
            variant = variant or {}
            image = _pick(images, index)
            row = {
                "Handle": product.get("handle") or "",
                "Title": product.get("title") or "",
                "Body (HTML)": product.get("body_html") or "",
                "Vendor": product.get("vendor") or "",
                "Product Category": product.get("product_category") or "",
                "Type": product.get("product_type") or "",
                "Tags": ", ".join(str(t) for t in tags) if isinstance(tags, list) else (tags or ""),
                "Status": product.get("status") or "active",
                "Gift Card": "TRUE" if product.get("gift_card") else "FALSE",
                "SEO Title": seo.get("title") or "",
                "SEO Description": seo.get("description") or "",
            }
            variant_options = variant.get("options") or {}
            for n in range(3):
                opt_name = _option_name(options, n)
                row[f"Option{n + 1} Name"] = opt_name
                row[f"Option{n + 1} Value"] = (variant_options.get(opt_name) or "") if opt_name else ""

            row.update({
                "Variant SKU": variant.get("sku") or "",
                "Variant Grams": variant.get("grams") or 0,
                "Variant Inventory Tracker": variant.get("inventory_tracker") or "",
                "Variant Inventory Qty": variant.get("inventory_quantity") or 0,
                "Variant Inventory Policy": variant.get("inventory_policy") or "deny",
                "Variant Fulfillment Service": variant.get("fulfillment_service") or "manual",
                "Variant Price": variant.get("price") or 0,
                "Variant Compare At Price": variant.get("compare_at_price") or None,
                "Variant Requires Shipping": "TRUE" if variant.get("requires_shipping") else "FALSE",
                "Variant Taxable": "TRUE" if variant.get("taxable") else "FALSE",
                "Variant Barcode": variant.get("barcode") or "",
                "Variant Weight Unit": variant.get("weight_unit") or "",
                "Variant Tax Code": variant.get("tax_code") or "",
                "Cost per item": variant.get("cost_per_item") or 0,
                "Image Src": image.get("src") or "",
                "Image Position": image.get("position") or (index + 1),
                "Image Alt Text": image.get("alt") or "",
                "Variant Image": variant.get("image") or "",
            })
            rows.append(row)

    logger.info("shopify transform: %d products -> %d rows", len(products), len(rows))
    return rows


def _pick(images: List[Any], index: int) -> Dict[str, Any]:
    for candidate in (index, 0):
        if candidate < len(images) and isinstance(images[candidate], dict):
            return images[candidate]
    return {}


def _option_name(options: List[Any], n: int) -> str:
    if n < len(options) and isinstance(options[n], dict):
        return options[n].get("name") or ""
    return ""
