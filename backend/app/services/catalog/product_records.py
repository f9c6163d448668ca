"""
Typed product records for the two supported platforms.

Rows arrive as CSV-shaped mappings keyed by the platform's column names
("Regular price", "Variant Price" ...). Each platform gets one pydantic model
whose fields alias those columns; columns we do not know are kept verbatim in
the model's extra map so nothing is lost on the way to the catalog.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# A spreadsheet cell. Kept loose so values round-trip without coercion
# ("19.90" stays a string, 19.9 stays a float).
Cell = Optional[Union[str, bool, int, float, List[Any], Dict[str, Any]]]


class Platform(str, Enum):
    WOOCOMMERCE = "woocommerce"
    SHOPIFY = "shopify"


def parse_platform(value: Union[str, Platform]) -> Platform:
    if isinstance(value, Platform):
        return value
    try:
        return Platform(str(value or "").strip().lower())
    except ValueError:
        raise ValueError(f"Unsupported platform: {value}") from None



class _ProductRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")



# ---------- WooCommerce ----------
class WooCommerceProduct(_ProductRecord):
    platform: Literal["woocommerce"] = "woocommerce"

    id_: Cell = Field(None, alias="ID")
    type: Cell = Field(None, alias="Type")
    sku: Cell = Field(None, alias="SKU")
    gtin: Cell = Field(None, alias="GTIN, UPC, EAN, or ISBN")
    name: Cell = Field(None, alias="Name")
    published: Cell = Field(None, alias="Published")
    is_featured: Cell = Field(None, alias="Is featured?")
    visibility: Cell = Field(None, alias="Visibility in catalog")
    short_description: Cell = Field(None, alias="Short description")
    description: Cell = Field(None, alias="Description")
    sale_starts: Cell = Field(None, alias="Date sale price starts")
    sale_ends: Cell = Field(None, alias="Date sale price ends")
    tax_status: Cell = Field(None, alias="Tax status")
    tax_class: Cell = Field(None, alias="Tax class")
    in_stock: Cell = Field(None, alias="In stock?")
    stock: Cell = Field(None, alias="Stock")
    low_stock_amount: Cell = Field(None, alias="Low stock amount")
    backorders: Cell = Field(None, alias="Backorders allowed?")
    sold_individually: Cell = Field(None, alias="Sold individually?")
    weight_kg: Cell = Field(None, alias="Weight (kg)")
    weight_g: Cell = Field(None, alias="Weight (g)")
    length_cm: Cell = Field(None, alias="Length (cm)")
    width_cm: Cell = Field(None, alias="Width (cm)")
    height_cm: Cell = Field(None, alias="Height (cm)")
    allow_reviews: Cell = Field(None, alias="Allow customer reviews?")
    purchase_note: Cell = Field(None, alias="Purchase note")
    sale_price: Cell = Field(None, alias="Sale price")
    regular_price: Cell = Field(None, alias="Regular price")
    categories: Cell = Field(None, alias="Categories")
    tags: Cell = Field(None, alias="Tags")
    shipping_class: Cell = Field(None, alias="Shipping class")
    images: Cell = Field(None, alias="Images")
    parent: Cell = Field(None, alias="Parent")
    upsells: Cell = Field(None, alias="Upsells")
    cross_sells: Cell = Field(None, alias="Cross-sells")
    grouped_products: Cell = Field(None, alias="Grouped products")
    external_url: Cell = Field(None, alias="External URL")
    button_text: Cell = Field(None, alias="Button text")
    position: Cell = Field(None, alias="Position")
    attribute_1_name: Cell = Field(None, alias="Attribute 1 name")
    attribute_1_values: Cell = Field(None, alias="Attribute 1 value(s)")
    attribute_2_name: Cell = Field(None, alias="Attribute 2 name")
    attribute_2_values: Cell = Field(None, alias="Attribute 2 value(s)")
    attribute_3_name: Cell = Field(None, alias="Attribute 3 name")
    attribute_3_values: Cell = Field(None, alias="Attribute 3 value(s)")
    seo_title: Cell = Field(None, alias="SEO Title")
    meta_description: Cell = Field(None, alias="Meta Description")

    @property
    def identity(self) -> str:
        return _cell_str(self.sku)

    @property
    def is_variation(self) -> bool:
        return _cell_str(self.type).lower() == "variation"



# ---------- Shopify (one flat row per variant, grouped by Handle) ----------
class ShopifyProduct(_ProductRecord):
    platform: Literal["shopify"] = "shopify"

    handle: Cell = Field(None, alias="Handle")
    title: Cell = Field(None, alias="Title")
    body_html: Cell = Field(None, alias="Body (HTML)")
    vendor: Cell = Field(None, alias="Vendor")
    product_category: Cell = Field(None, alias="Product Category")
    type: Cell = Field(None, alias="Type")
    tags: Cell = Field(None, alias="Tags")
    published: Cell = Field(None, alias="Published")
    option1_name: Cell = Field(None, alias="Option1 Name")
    option1_value: Cell = Field(None, alias="Option1 Value")
    option1_linked_to: Cell = Field(None, alias="Option1 Linked To")
    option2_name: Cell = Field(None, alias="Option2 Name")
    option2_value: Cell = Field(None, alias="Option2 Value")
    option2_linked_to: Cell = Field(None, alias="Option2 Linked To")
    option3_name: Cell = Field(None, alias="Option3 Name")
    option3_value: Cell = Field(None, alias="Option3 Value")
    option3_linked_to: Cell = Field(None, alias="Option3 Linked To")
    variant_sku: Cell = Field(None, alias="Variant SKU")
    variant_grams: Cell = Field(None, alias="Variant Grams")
    variant_inventory_tracker: Cell = Field(None, alias="Variant Inventory Tracker")
    variant_inventory_qty: Cell = Field(None, alias="Variant Inventory Qty")
    variant_inventory_policy: Cell = Field(None, alias="Variant Inventory Policy")
    variant_fulfillment_service: Cell = Field(None, alias="Variant Fulfillment Service")
    variant_price: Cell = Field(None, alias="Variant Price")
    variant_compare_at_price: Cell = Field(None, alias="Variant Compare At Price")
    variant_requires_shipping: Cell = Field(None, alias="Variant Requires Shipping")
    variant_taxable: Cell = Field(None, alias="Variant Taxable")
    unit_price_total_measure: Cell = Field(None, alias="Unit Price Total Measure")
    unit_price_total_measure_unit: Cell = Field(None, alias="Unit Price Total Measure Unit")
    unit_price_base_measure: Cell = Field(None, alias="Unit Price Base Measure")
    unit_price_base_measure_unit: Cell = Field(None, alias="Unit Price Base Measure Unit")
    variant_barcode: Cell = Field(None, alias="Variant Barcode")
    image_src: Cell = Field(None, alias="Image Src")
    image_position: Cell = Field(None, alias="Image Position")
    image_alt_text: Cell = Field(None, alias="Image Alt Text")
    gift_card: Cell = Field(None, alias="Gift Card")
    seo_title: Cell = Field(None, alias="SEO Title")
    seo_description: Cell = Field(None, alias="SEO Description")
    variant_image: Cell = Field(None, alias="Variant Image")
    variant_weight_unit: Cell = Field(None, alias="Variant Weight Unit")
    variant_tax_code: Cell = Field(None, alias="Variant Tax Code")
    cost_per_item: Cell = Field(None, alias="Cost per item")
    status: Cell = Field(None, alias="Status")

    @property
    def identity(self) -> str:
        return _cell_str(self.handle)

    @property
    def is_variation(self) -> bool:
        # Shopify variants are sibling rows under one Handle, none is a "variation" row
        return False



ProductRecord = Annotated[Union[WooCommerceProduct, ShopifyProduct], Field(discriminator="platform")]
_records_adapter = TypeAdapter(List[ProductRecord])

PRODUCT_MODEL_NAMES = {
    Platform.WOOCOMMERCE: "WooCommerceProduct",
    Platform.SHOPIFY: "ShopifyProduct",
}


def parse_products(platform: Union[str, Platform], rows: Iterable[Dict[str, Any]]) -> List[Union[WooCommerceProduct, ShopifyProduct]]:
    """Build typed records from column-keyed rows; the platform tag is stamped on every row."""
    tag = parse_platform(platform).value
    tagged = [{**row, "platform": tag} if isinstance(row, dict) else row for row in rows]
    return _records_adapter.validate_python(tagged)


def dump_product(record: _ProductRecord) -> Dict[str, Any]:
    """Column-keyed dict: every declared column (None when absent) plus passthrough extras."""
    return record.model_dump(by_alias=True, exclude={"platform"})


def _cell_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
