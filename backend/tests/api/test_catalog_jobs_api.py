from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.api.v1.catalog_jobs import get_job_queue
from app.db.session import get_db
from app.main import app


class RecordingQueue:
    def __init__(self):
        self.payloads = []

    def enqueue(self, payload):
        self.payloads.append(payload)
        return "task-1"


@pytest.fixture()
def queue():
    return RecordingQueue()


@pytest.fixture()
def client(session_factory, queue):
    def _db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_job_queue] = lambda: queue
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_submit_then_poll(client, queue, woo_rows):
    resp = client.post(
        "/api/v1/catalog-jobs/woocommerce",
        json={"owner_id": "owner-1", "name": "Spring", "products": woo_rows(3)},
    )
    assert resp.status_code == 202
    body = resp.json()
    assert body["ok"] is True
    assert body["status"] == "queued"
    assert len(queue.payloads) == 1

    status = client.get(f"/api/v1/catalog-jobs/{body['job_id']}")
    assert status.status_code == 200
    assert status.json()["status"] == "queued"
    assert status.json()["total_products"] == 3


def test_submit_with_errors_is_400(client, queue, shopify_row):
    resp = client.post(
        "/api/v1/catalog-jobs/shopify",
        json={"owner_id": "owner-1", "products": [shopify_row("tee", **{"Variant Price": ""})]},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["ok"] is False
    assert body["errors"][0]["field"] == "Variant Price"
    assert queue.payloads == []


def test_unknown_platform_and_job(client):
    assert client.post("/api/v1/catalog-jobs/etsy", json={"owner_id": "o", "products": []}).status_code == 422
    assert client.get("/api/v1/catalog-jobs/missing").status_code == 404


def test_health(client):
    assert client.get("/api/v1/health").json() == {"status": "ok"}
