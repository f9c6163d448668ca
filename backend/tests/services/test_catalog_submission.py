from __future__ import annotations

import pytest

from app.db.model.catalog_job import CatalogJob, JobStatus
from app.services.catalog.catalog_submission import (
    flatten_woocommerce_variations,
    get_job_status,
    shopify_variants_to_rows,
    submit_catalog_job,
)
from app.services.catalog.errors import ProductValidationError


class RecordingQueue:
    def __init__(self, fail: bool = False):
        self.payloads = []
        self.fail = fail

    def enqueue(self, payload):
        if self.fail:
            raise ConnectionError("broker unreachable")
        self.payloads.append(payload)
        return "task-1"


def test_valid_submission_creates_queued_job_and_enqueues(db, woo_rows):
    queue = RecordingQueue()
    rows = woo_rows(25)
    rows[3]["Categories"] = ""

    result = submit_catalog_job(
        db, products=rows, platform="woocommerce", owner_id="owner-1", requested_name=" Spring ", queue=queue
    )

    assert result.status == JobStatus.QUEUED
    assert result.total_products == 25
    assert [(w.row, w.field) for w in result.warnings] == [(5, "Categories")]

    [payload] = queue.payloads
    assert payload.job_id == result.job_id
    assert payload.owner_id == "owner-1"
    assert payload.platform == "woocommerce"
    assert payload.catalog_name == "Spring"
    assert len(payload.products) == 25

    status = get_job_status(db, result.job_id)
    assert status["status"] == "queued"
    assert status["total_products"] == 25


def test_invalid_row_rejects_before_any_job_exists(db, woo_rows):
    queue = RecordingQueue()
    rows = woo_rows(10)
    del rows[6]["Name"]          # product #7

    with pytest.raises(ProductValidationError) as exc:
        submit_catalog_job(db, products=rows, platform="woocommerce", owner_id="owner-1", queue=queue)

    assert [(e.row, e.field) for e in exc.value.result.errors] == [(8, "Name")]
    assert queue.payloads == []
    assert db.query(CatalogJob).count() == 0


def test_enqueue_failure_fails_the_job(db, woo_rows):
    with pytest.raises(ConnectionError):
        submit_catalog_job(db, products=woo_rows(2), platform="woocommerce", owner_id="o", queue=RecordingQueue(fail=True))

    job = db.query(CatalogJob).one()
    assert job.status == JobStatus.FAILED
    assert "broker unreachable" in job.error


def test_unknown_job_status_is_none(db):
    assert get_job_status(db, "nope") is None


def test_nested_woocommerce_variations_are_flattened(woo_row):
    parent = woo_row(1, Type="variable")
    del parent["Regular price"]
    parent["variations"] = [
        {"Type": "variation", "SKU": "SKU-001-S", "Name": "Product 1 S", "Regular price": "10"},
        {"Type": "variation", "SKU": "SKU-001-M", "Name": "Product 1 M", "Regular price": "11", "Parent": "custom"},
    ]
    rows = flatten_woocommerce_variations([parent, woo_row(2)])

    assert [r["SKU"] for r in rows] == ["SKU-001", "SKU-001-S", "SKU-001-M", "SKU-002"]
    assert "variations" not in rows[0]
    assert rows[1]["Parent"] == "SKU-001"
    assert rows[2]["Parent"] == "custom"


def test_flattened_row_count_is_the_job_total(db, woo_row):
    parent = woo_row(1, Type="variable")
    parent["variations"] = [
        {"Type": "variation", "SKU": f"V-{i}", "Name": f"V {i}", "Regular price": "9"} for i in range(3)
    ]
    queue = RecordingQueue()
    result = submit_catalog_job(db, products=[parent], platform="woocommerce", owner_id="o", queue=queue)

    assert result.total_products == 4
    assert len(queue.payloads[0].products) == 4


def test_shopify_api_shape_becomes_csv_rows():
    products = [{
        "handle": "tee",
        "title": "Tee",
        "vendor": "Acme",
        "tags": ["cotton", "summer"],
        "options": [{"name": "Size"}, {"name": "Color"}],
        "images": [{"src": "a.jpg", "position": 1, "alt": "front"}],
        "variants": [
            {"sku": "TEE-S-RED", "price": "20.00", "options": {"Size": "S", "Color": "Red"}, "taxable": True},
            {"sku": "TEE-M-RED", "price": "21.00", "options": {"Size": "M", "Color": "Red"}},
        ],
    }]
    rows = shopify_variants_to_rows(products)

    assert len(rows) == 2
    first, second = rows
    assert first["Handle"] == second["Handle"] == "tee"
    assert first["Tags"] == "cotton, summer"
    assert (first["Option1 Name"], first["Option1 Value"], first["Option2 Value"]) == ("Size", "S", "Red")
    assert first["Option3 Name"] == "" and first["Option3 Value"] == ""
    assert first["Variant Taxable"] == "TRUE" and second["Variant Taxable"] == "FALSE"
    assert first["Status"] == "active"
    assert first["Gift Card"] == "FALSE"
    assert second["Image Src"] == "a.jpg"       # falls back to the first image
    assert second["Variant Price"] == "21.00"


def test_shopify_submission_uses_flat_rows(db):
    queue = RecordingQueue()
    products = [{"handle": "cap", "title": "Cap", "variants": [{"price": "9.50"}, {"price": "9.50"}]}]

    result = submit_catalog_job(db, products=products, platform="shopify", owner_id="o", queue=queue)

    assert result.total_products == 2
    assert queue.payloads[0].products[0]["Variant Price"] == "9.50"
