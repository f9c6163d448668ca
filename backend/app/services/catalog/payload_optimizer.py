"""
Shrinks full product records into the few fields the copywriting model needs.

WooCommerce: variation rows are dropped (they inherit the parent's copy).
Shopify: one payload per Handle, first row wins, rows without a Handle are skipped.
Attribute / option pairs are folded into "name: value" strings.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, List, Sequence, Union

from app.services.catalog.product_records import (
    Platform,
    ShopifyProduct,
    WooCommerceProduct,
    parse_platform,
)
from app.utils.serialization import to_jsonable

logger = logging.getLogger(__name__)

# rough rule of thumb for English text
CHARS_PER_TOKEN = 4

OptimizedPayload = Dict[str, Any]



def optimize_for_generation(
    products: Sequence[Union[WooCommerceProduct, ShopifyProduct]],
    platform: Union[str, Platform],
) -> List[OptimizedPayload]:
    plat = parse_platform(platform)

    if plat == Platform.WOOCOMMERCE:
        primary = [p for p in products if not p.is_variation]
        logger.info(
            "woocommerce optimize: rows=%d payloads=%d variations_skipped=%d",
            len(products), len(primary), len(products) - len(primary),
        )
        return [_woocommerce_payload(p) for p in primary]

    seen: Dict[str, ShopifyProduct] = {}
    for p in products:
        handle = p.identity
        if handle and handle not in seen:
            seen[handle] = p
    logger.info("shopify optimize: rows=%d unique_handles=%d", len(products), len(seen))
    return [_shopify_payload(p) for p in seen.values()]



def _woocommerce_payload(p: WooCommerceProduct) -> OptimizedPayload:
    out: OptimizedPayload = {
        "Type": _or_blank(p.type) or "simple",
        "SKU": _or_blank(p.sku),
        "Name": _or_blank(p.name),
        "Regular price": _or_blank(p.regular_price),
        "Sale price": _or_blank(p.sale_price),
        "Categories": _or_blank(p.categories),
        "Tags": _or_blank(p.tags),
        "Images": _or_blank(p.images),
        "GTIN": _or_blank(p.gtin),
    }
    pairs = (
        (p.attribute_1_name, p.attribute_1_values),
        (p.attribute_2_name, p.attribute_2_values),
        (p.attribute_3_name, p.attribute_3_values),
    )
    for n, (name, value) in enumerate(pairs, start=1):
        if _or_blank(name) and _or_blank(value):
            out[f"Attribute {n}"] = f"{name}: {value}"
    return out


def _shopify_payload(p: ShopifyProduct) -> OptimizedPayload:
    out: OptimizedPayload = {
        "Handle": _or_blank(p.handle),
        "Title": _or_blank(p.title),
        "Vendor": _or_blank(p.vendor),
        "Product Category": _or_blank(p.product_category),
        "Type": _or_blank(p.type),
        "Tags": _or_blank(p.tags),
        "Price": _or_blank(p.variant_price),
        "Compare At Price": _or_blank(p.variant_compare_at_price),
        "Images": _or_blank(p.image_src),
        "Barcode": _or_blank(p.variant_barcode),
    }
    pairs = (
        (p.option1_name, p.option1_value),
        (p.option2_name, p.option2_value),
        (p.option3_name, p.option3_value),
    )
    for n, (name, value) in enumerate(pairs, start=1):
        if _or_blank(name) and _or_blank(value):
            out[f"Option {n}"] = f"{name}: {value}"
    return out


def _or_blank(value: Any) -> Any:
    if value is None or value is False:
        return ""
    if isinstance(value, str) and not value.strip():
        return ""
    return value



"""
   Token estimate before/after projection, logged once per batch.
   ~4 characters per token; savings percentage is 0 for an empty original.
"""
def estimate_token_savings(original: Sequence[Any], optimized: Sequence[Any]) -> Dict[str, int]:
    original_tokens = math.ceil(len(_compact_json(original)) / CHARS_PER_TOKEN)
    optimized_tokens = math.ceil(len(_compact_json(optimized)) / CHARS_PER_TOKEN)
    saved = original_tokens - optimized_tokens
    pct = int(math.floor(saved * 100 / original_tokens + 0.5)) if original_tokens else 0
    return {
        "original_estimate": original_tokens,
        "optimized_estimate": optimized_tokens,
        "saved_tokens": saved,
        "saved_percentage": pct,
    }


def _compact_json(value: Any) -> str:
    return json.dumps(to_jsonable(value), ensure_ascii=False, separators=(",", ":"))
