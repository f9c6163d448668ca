"""
Pre-submission checks for raw product rows.

validate_products() never raises on bad data: every problem becomes a
ValidationIssue. Errors block the submission, warnings are returned to the
caller alongside the accepted job.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

from app.services.catalog.product_records import Platform, parse_platform


# ---------- rule tables ----------
WOO_TYPES = ("simple", "variable", "variation", "grouped", "external", "downloadable")
WOO_TAX_CLASSES = ("standard", "reduced-rate", "zero-rate")
WOO_BACKORDERS = (0, 1, 2)
WOO_FLAGS = ("Is featured?", "Sold individually?", "Allow customer reviews?")
WOO_DIMENSIONS = ("Length (cm)", "Width (cm)", "Height (cm)")
WOO_REQUIRED = ("Type", "SKU", "Name", "Regular price")

SHOPIFY_STATUSES = ("active", "draft", "archived")
SHOPIFY_REQUIRED = ("Handle", "Title")
SHOPIFY_LINKED_TO = ("Option1 Linked To", "Option2 Linked To", "Option3 Linked To")
UNIT_MEASURES = ("ml", "l", "g", "kg", "oz", "lb", "fl oz", "m", "cm", "mm", "in", "ft", "yd")
UNIT_PRICE_FIELDS = (
    "Unit Price Total Measure",
    "Unit Price Total Measure Unit",
    "Unit Price Base Measure",
    "Unit Price Base Measure Unit",
)

PRICE_WARN_ABOVE = 10000
WEIGHT_KG_WARN_ABOVE = 50
WEIGHT_G_WARN_ABOVE = 50000
DIMENSION_WARN_ABOVE = 500

BARCODE_RE = re.compile(r"^\d{8,14}$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
METAFIELD_RE = re.compile(r"^[a-z_]+\.[a-z_]+\.[a-z_]+$", re.IGNORECASE)

# row 1 of the spreadsheet is the header
FIRST_DATA_ROW = 2



@dataclass(frozen=True)
class ValidationIssue:
    row: int
    field: str
    message: str
    type: str = "error"       # error | warning

    def to_dict(self) -> Dict[str, Any]:
        return {"row": self.row, "field": self.field, "message": self.message, "type": self.type}


@dataclass
class ValidationResult:
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def error(self, row: int, field_name: str, message: str) -> None:
        self.errors.append(ValidationIssue(row, field_name, message, "error"))

    def warning(self, row: int, field_name: str, message: str) -> None:
        self.warnings.append(ValidationIssue(row, field_name, message, "warning"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }



def validate_products(products: Any, platform: Union[str, Platform]) -> ValidationResult:
    """
    Check every row against the platform rules. Pure: the input is not modified.
    An empty or non-list input yields a single row-0 error on "products".
    """
    plat = parse_platform(platform)
    result = ValidationResult()

    if not isinstance(products, (list, tuple)) or len(products) == 0:
        result.error(0, "products", "Products array is required and cannot be empty")
        return result

    check = _check_woocommerce_row if plat == Platform.WOOCOMMERCE else _check_shopify_row
    for index, row in enumerate(products):
        row_num = index + FIRST_DATA_ROW
        if not isinstance(row, dict):
            result.error(row_num, "products", "Product row must be an object")
            continue
        check(row, row_num, result)

    return result



# ========= WooCommerce =========
def _check_woocommerce_row(p: Dict[str, Any], row: int, result: ValidationResult) -> None:
    product_type = _text(p.get("Type")).lower()
    is_variable_parent = product_type == "variable"

    for name in WOO_REQUIRED:
        if name == "Regular price" and is_variable_parent:
            continue
        if not _filled(p.get(name)):
            result.error(row, name, f"{name} is required")

    # price (variable parents carry no price of their own)
    regular = p.get("Regular price")
    if not is_variable_parent and _filled(regular):
        price = _to_number(regular)
        if price is None or price < 0:
            result.error(row, "Regular price", "Price must be a positive number")
        elif price > PRICE_WARN_ABOVE:
            result.warning(row, "Regular price", f"Price seems unusually high (${_fmt(price)})")

    if _filled(p.get("Type")) and product_type not in WOO_TYPES:
        result.error(row, "Type", f"Type must be one of: {', '.join(WOO_TYPES)}")

    if product_type == "variation" and not _filled(p.get("Parent")):
        result.error(row, "Parent", "Variation must reference its parent product")

    gtin = p.get("GTIN, UPC, EAN, or ISBN")
    if _filled(gtin) and not BARCODE_RE.match(_text(gtin)):
        result.error(row, "GTIN, UPC, EAN, or ISBN", "GTIN/UPC/EAN must be 8-14 digits only")

    # weight: kg or g columns
    if _filled(p.get("Weight (kg)")):
        kg = _to_number(p.get("Weight (kg)"))
        if kg is None or kg < 0:
            result.error(row, "Weight (kg)", "Weight must be a positive number (in kilograms)")
        elif kg > WEIGHT_KG_WARN_ABOVE:
            result.warning(row, "Weight (kg)", f"Weight seems unusually high ({_fmt(kg)}kg)")

    if _filled(p.get("Weight (g)")):
        grams = _to_number(p.get("Weight (g)"))
        if grams is None or grams < 0:
            result.error(row, "Weight (g)", "Weight must be a positive number (in grams)")
        elif grams > WEIGHT_G_WARN_ABOVE:
            result.warning(row, "Weight (g)", f"Weight seems unusually high ({_fmt(grams)}g = {grams / 1000:.2f}kg)")

    for name in WOO_DIMENSIONS:
        if not _filled(p.get(name)):
            continue
        dim = _to_number(p.get(name))
        if dim is None or dim < 0:
            result.error(row, name, f"{name} must be a positive number")
        elif dim > DIMENSION_WARN_ABOVE:
            result.warning(row, name, f"{name} seems unusually large ({_fmt(dim)}cm = {dim / 100:.2f}m)")

    _check_sale(p, row, result)

    if _filled(p.get("Tax class")) and _text(p.get("Tax class")).lower() not in WOO_TAX_CLASSES:
        result.error(row, "Tax class", f"Tax class must be one of: {', '.join(WOO_TAX_CLASSES)}")

    if _filled(p.get("Backorders allowed?")):
        if _to_number(p.get("Backorders allowed?")) not in WOO_BACKORDERS:
            result.error(row, "Backorders allowed?", "Backorders must be 0 (No), 1 (Notify), or 2 (Yes)")

    for name in WOO_FLAGS:
        if _filled(p.get(name)) and _to_number(p.get(name)) not in (0, 1):
            result.error(row, name, f"{name} must be 0 or 1")

    if _filled(p.get("Stock")):
        stock = _to_number(p.get("Stock"))
        if stock is None or stock < 0 or not float(stock).is_integer():
            result.error(row, "Stock", "Stock must be a whole number >= 0")

    if not _filled(p.get("Categories")) and product_type != "variation":
        result.warning(row, "Categories", "Product has no category assigned")



'''
  Sale price must undercut the regular price; the sale window is optional
  but both dates must be ISO days and end strictly after start.
'''
def _check_sale(p: Dict[str, Any], row: int, result: ValidationResult) -> None:
    starts_raw = p.get("Date sale price starts")
    ends_raw = p.get("Date sale price ends")

    if _filled(p.get("Sale price")):
        sale = _to_number(p.get("Sale price"))
        regular = _to_number(p.get("Regular price"))
        if sale is None or sale < 0:
            result.error(row, "Sale price", "Sale price must be a positive number")
        elif regular is not None and sale >= regular:
            result.error(row, "Sale price", "Sale price must be less than regular price")

        if not _filled(starts_raw) and not _filled(ends_raw):
            result.warning(row, "Sale price", "Sale price set but no sale dates defined")

    if not (_filled(starts_raw) or _filled(ends_raw)):
        return

    starts, ends = _text(starts_raw), _text(ends_raw)
    start_day = _parse_day(starts)
    end_day = _parse_day(ends)

    if starts and start_day is None:
        result.error(row, "Date sale price starts", "Date sale price starts must be in YYYY-MM-DD format")
    if ends and end_day is None:
        result.error(row, "Date sale price ends", "Date sale price ends must be in YYYY-MM-DD format")
    if start_day and end_day and end_day <= start_day:
        result.error(row, "Date sale price ends", "Sale end date must be after start date")



# ========= Shopify =========
def _check_shopify_row(p: Dict[str, Any], row: int, result: ValidationResult) -> None:
    for name in SHOPIFY_REQUIRED:
        if not _filled(p.get(name)):
            result.error(row, name, f"{name} is required")

    price = None
    if not _filled(p.get("Variant Price")):
        result.error(row, "Variant Price", "Price is required")
    else:
        price = _to_number(p.get("Variant Price"))
        if price is None or price < 0:
            result.error(row, "Variant Price", "Price must be a positive number")
            price = None
        elif price > PRICE_WARN_ABOVE:
            result.warning(row, "Variant Price", f"Price seems unusually high (${_fmt(price)})")

    if _filled(p.get("Status")) and _text(p.get("Status")).lower() not in SHOPIFY_STATUSES:
        result.error(row, "Status", f"Status must be one of: {', '.join(SHOPIFY_STATUSES)}")

    _check_unit_pricing(p, row, result)

    for name in SHOPIFY_LINKED_TO:
        if _filled(p.get(name)) and not METAFIELD_RE.match(_text(p.get(name))):
            result.error(row, name, "Must be in format: namespace.type.key (e.g., product.metafields.custom.color)")

    if _filled(p.get("Cost per item")):
        cost = _to_number(p.get("Cost per item"))
        if cost is None or cost < 0:
            result.error(row, "Cost per item", "Cost per item must be a positive number")
        elif price is not None and cost > price:
            result.warning(
                row, "Cost per item",
                f"Cost (${_fmt(cost)}) is higher than price (${_fmt(price)}) - negative margin",
            )

    if _filled(p.get("Gift Card")) and _text(p.get("Gift Card")).upper() not in ("TRUE", "FALSE"):
        result.error(row, "Gift Card", "Gift Card must be TRUE or FALSE")

    barcode = p.get("Variant Barcode")
    if _filled(barcode) and not BARCODE_RE.match(_text(barcode)):
        result.error(row, "Variant Barcode", "Barcode must be 8-14 digits only")



# all four unit-price columns travel together
def _check_unit_pricing(p: Dict[str, Any], row: int, result: ValidationResult) -> None:
    filled = [name for name in UNIT_PRICE_FIELDS if _filled(p.get(name))]
    if not filled:
        return
    if len(filled) != len(UNIT_PRICE_FIELDS):
        result.error(row, "Unit Price Total Measure", "All 4 unit price fields must be filled together or left empty")
        return

    total = _to_number(p.get("Unit Price Total Measure"))
    base = _to_number(p.get("Unit Price Base Measure"))
    if total is None or total <= 0:
        result.error(row, "Unit Price Total Measure", "Unit Price Total Measure must be a positive number")
    if base is None or base <= 0:
        result.error(row, "Unit Price Base Measure", "Unit Price Base Measure must be a positive number")

    units = ", ".join(UNIT_MEASURES)
    for name in ("Unit Price Total Measure Unit", "Unit Price Base Measure Unit"):
        if _text(p.get(name)).lower() not in UNIT_MEASURES:
            result.error(row, name, f"{name} must be a valid unit: {units}")

    if total is not None and base is not None and total < base:
        result.error(row, "Unit Price Total Measure", "Total measure must be greater than or equal to base measure")



# ---------- cell helpers ----------
def _filled(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _to_number(value: Any) -> Optional[float]:
    """Spreadsheet cell -> number; None when it is not numeric."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        try:
            num = float(_text(value))
        except ValueError:
            return None
    if math.isnan(num) or math.isinf(num):
        return None
    return num


def _parse_day(value: str) -> Optional[date]:
    if not value or not DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _fmt(num: float) -> str:
    return str(int(num)) if float(num).is_integer() else str(num)


def summarize_issues(issues: Sequence[ValidationIssue], limit: int = 5) -> str:
    head = "; ".join(f"row {i.row} {i.field}: {i.message}" for i in issues[:limit])
    more = len(issues) - limit
    return head + (f" (+{more} more)" if more > 0 else "")
