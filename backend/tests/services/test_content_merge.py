from __future__ import annotations

import logging

from app.services.catalog.content_merge import merge_generated_content
from app.services.catalog.product_records import dump_product, parse_products

WOO_AI = {"Short description", "Description", "SEO Title", "Meta Description"}
SHOPIFY_AI = {"Body (HTML)", "SEO Title", "SEO Description", "Image Alt Text"}


def test_woocommerce_merge_touches_only_ai_fields(woo_rows):
    originals = parse_products("woocommerce", woo_rows(3))
    generated = [
        {"SKU": "SKU-001", "Short description": "short", "Description": "long",
         "SEO Title": "title", "Meta Description": "meta", "Regular price": "0.01"},
        {"SKU": "SKU-002", "Description": "only long"},
    ]
    before = [dump_product(r) for r in originals]

    merged = merge_generated_content(originals, generated, "woocommerce")
    after = [dump_product(r) for r in merged]

    assert len(merged) == len(originals)
    for b, a in zip(before, after):
        assert len(a) == len(b)
        for column in b:
            if column not in WOO_AI:
                assert a[column] == b[column]

    assert after[0]["Short description"] == "short"
    assert after[0]["SEO Title"] == "title"
    assert after[0]["Regular price"] == "19.90"      # never overwritten
    assert after[1]["Description"] == "only long"
    assert after[1]["Short description"] == ""       # untouched original value
    # originals are not modified in place
    assert [dump_product(r) for r in originals] == before


def test_empty_generated_values_do_not_overwrite(woo_row):
    originals = parse_products("woocommerce", [woo_row(1, Description="Existing copy")])
    generated = [{"SKU": "SKU-001", "Description": "   ", "SEO Title": None, "Meta Description": "meta"}]

    [merged] = merge_generated_content(originals, generated, "woocommerce")
    out = dump_product(merged)

    assert out["Description"] == "Existing copy"
    assert out["SEO Title"] is None
    assert out["Meta Description"] == "meta"


def test_variations_and_unmatched_rows_pass_through(woo_row, caplog):
    originals = parse_products("woocommerce", [
        woo_row(1, Type="variable"),
        woo_row(2, Type="variation", Parent="SKU-001"),
        woo_row(3),
    ])
    generated = [
        {"SKU": "SKU-001", "Description": "parent copy"},
        {"SKU": "SKU-002", "Description": "should never land on a variation"},
    ]
    with caplog.at_level(logging.WARNING):
        merged = merge_generated_content(originals, generated, "woocommerce")

    assert merged[0].description == "parent copy"
    assert merged[1] is originals[1]
    assert merged[2] is originals[2]
    assert "SKU-003" in caplog.text


def test_shopify_one_record_serves_every_variant_row(shopify_row):
    originals = parse_products("shopify", [
        shopify_row("tee", **{"Option1 Value": "S"}),
        shopify_row("tee", **{"Option1 Value": "M"}),
        shopify_row("cap"),
    ])
    generated = [{"Handle": "tee", "Body (HTML)": "<p>tee</p>", "SEO Title": "Tee",
                  "SEO Description": "desc", "Image Alt Text": "alt", "Title": "Renamed"}]

    merged = merge_generated_content(originals, generated, "shopify")
    rows = [dump_product(r) for r in merged]

    assert rows[0]["Body (HTML)"] == rows[1]["Body (HTML)"] == "<p>tee</p>"
    assert rows[0]["Option1 Value"] == "S" and rows[1]["Option1 Value"] == "M"
    assert rows[0]["Title"] == "Tee"            # non-AI column from the model is ignored
    assert merged[2] is originals[2]
    for orig, new in zip(originals, merged):
        a, b = dump_product(orig), dump_product(new)
        assert set(a) == set(b)
        assert {k for k in a if a[k] != b[k]} <= SHOPIFY_AI


def test_merge_round_trip_preserves_counts(woo_rows):
    from app.services.catalog.payload_optimizer import optimize_for_generation

    originals = parse_products("woocommerce", woo_rows(4))
    payloads = optimize_for_generation(originals, "woocommerce")
    generated = [{"SKU": p["SKU"], "Description": f"copy {p['SKU']}"} for p in payloads]

    merged = merge_generated_content(originals, generated, "woocommerce")

    assert len(merged) == len(originals)
    assert [len(dump_product(m)) for m in merged] == [len(dump_product(o)) for o in originals]
