"""
Puts generated copy back onto the full product records.

Only the platform's AI-authored columns can change, and only with a non-empty
generated value. Every other column (and the record's column count) stays as
submitted. Output has the same length and order as the input.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence, Union

from app.services.catalog.product_records import (
    Platform,
    ShopifyProduct,
    WooCommerceProduct,
    parse_platform,
)

logger = logging.getLogger(__name__)


# generated column -> record attribute
WOO_AI_FIELDS = {
    "Short description": "short_description",
    "Description": "description",
    "SEO Title": "seo_title",
    "Meta Description": "meta_description",
}
SHOPIFY_AI_FIELDS = {
    "Body (HTML)": "body_html",
    "SEO Title": "seo_title",
    "SEO Description": "seo_description",
    "Image Alt Text": "image_alt_text",
}

Record = Union[WooCommerceProduct, ShopifyProduct]



def merge_generated_content(
    originals: Sequence[Record],
    generated: Sequence[Mapping[str, Any]],
    platform: Union[str, Platform],
) -> List[Record]:
    plat = parse_platform(platform)
    if plat == Platform.WOOCOMMERCE:
        match_key, ai_fields = "SKU", WOO_AI_FIELDS
    else:
        match_key, ai_fields = "Handle", SHOPIFY_AI_FIELDS

    by_identity = _index_generated(generated, match_key)

    merged: List[Record] = []
    for record in originals:
        # variations never had copy generated for them
        if record.is_variation:
            merged.append(record)
            continue

        content = by_identity.get(record.identity)
        if content is None:
            logger.warning("no generated content for %s=%s, keeping original", match_key, record.identity)
            merged.append(record)
            continue

        merged.append(_apply(record, content, ai_fields))
    return merged



# first generated entry per identity wins
def _index_generated(generated: Sequence[Mapping[str, Any]], match_key: str) -> Dict[str, Mapping[str, Any]]:
    index: Dict[str, Mapping[str, Any]] = {}
    for item in generated:
        if not isinstance(item, Mapping):
            continue
        ident = item.get(match_key)
        if ident is None or str(ident).strip() == "":
            continue
        index.setdefault(str(ident).strip(), item)
    return index


def _apply(record: Record, content: Mapping[str, Any], ai_fields: Dict[str, str]) -> Record:
    update = {}
    for column, attr in ai_fields.items():
        value = content.get(column)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        update[attr] = value
    if not update:
        return record
    return record.model_copy(update=update)
