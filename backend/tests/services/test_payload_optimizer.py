from __future__ import annotations

from app.services.catalog.payload_optimizer import estimate_token_savings, optimize_for_generation
from app.services.catalog.product_records import dump_product, parse_products


def test_woocommerce_variations_are_excluded(woo_row):
    rows = [
        woo_row(1, Type="variable"),
        woo_row(2, Type="variation", Parent="SKU-001"),
        woo_row(3, Type="Variation", Parent="SKU-001"),
        woo_row(4),
    ]
    payloads = optimize_for_generation(parse_products("woocommerce", rows), "woocommerce")

    assert [p["SKU"] for p in payloads] == ["SKU-001", "SKU-004"]
    assert len(payloads) < len(rows)


def test_woocommerce_projection_and_attribute_folding(woo_row):
    row = woo_row(7, **{
        "GTIN, UPC, EAN, or ISBN": "12345678",
        "Attribute 2 name": "Size",
        "Attribute 2 value(s)": "S, M, L",
        "Attribute 3 name": "Material",     # no value -> not folded
        "Type": "",
    })
    [payload] = optimize_for_generation(parse_products("woocommerce", [row]), "woocommerce")

    assert payload == {
        "Type": "simple",
        "SKU": "SKU-007",
        "Name": "Product 7",
        "Regular price": "19.90",
        "Sale price": "",
        "Categories": "Home > Kitchen",
        "Tags": "kitchen, steel",
        "Images": "https://cdn.example.com/7.jpg",
        "GTIN": "12345678",
        "Attribute 1": "Color: Red",
        "Attribute 2": "Size: S, M, L",
    }


def test_shopify_dedup_first_row_per_handle_wins(shopify_row):
    rows = [
        shopify_row("tee", **{"Option1 Value": "S", "Variant Price": "20.00"}),
        shopify_row("tee", **{"Option1 Value": "M", "Variant Price": "21.00"}),
        shopify_row("cap"),
        shopify_row("", Title="orphan"),
        shopify_row("tee", **{"Option1 Value": "L"}),
    ]
    payloads = optimize_for_generation(parse_products("shopify", rows), "shopify")

    assert [p["Handle"] for p in payloads] == ["tee", "cap"]
    tee = payloads[0]
    assert tee["Price"] == "20.00"
    assert tee["Option 1"] == "Size: S"
    assert set(tee) >= {"Handle", "Title", "Vendor", "Product Category", "Type", "Tags",
                        "Price", "Compare At Price", "Images", "Barcode"}


def test_payload_identities_are_unique(shopify_row, woo_rows):
    shop = optimize_for_generation(
        parse_products("shopify", [shopify_row("a"), shopify_row("b"), shopify_row("a")]), "shopify"
    )
    woo = optimize_for_generation(parse_products("woocommerce", woo_rows(5)), "woocommerce")
    assert len({p["Handle"] for p in shop}) == len(shop)
    assert len({p["SKU"] for p in woo}) == len(woo)


def test_token_savings_estimate(woo_rows):
    records = parse_products("woocommerce", woo_rows(3))
    payloads = optimize_for_generation(records, "woocommerce")
    est = estimate_token_savings([dump_product(r) for r in records], payloads)

    assert est["original_estimate"] > est["optimized_estimate"] > 0
    assert est["saved_tokens"] == est["original_estimate"] - est["optimized_estimate"]
    assert 0 < est["saved_percentage"] < 100


def test_token_savings_empty_original():
    assert estimate_token_savings([], [])["saved_percentage"] == 0
