from __future__ import annotations

from app.orchestration.catalog_generation import catalog_job_task


def test_task_builds_runner_from_settings_and_runs(monkeypatch):
    seen = {}

    class Runner:
        def run(self, payload):
            seen["payload"] = payload
            return {"job_id": payload.job_id, "status": "completed", "catalog_id": "cat-1"}

    monkeypatch.setattr(catalog_job_task.CatalogJobRunner, "from_settings", classmethod(lambda cls: Runner()))

    result = catalog_job_task.process_catalog_job.run(
        {"job_id": "job-9", "owner_id": "o", "platform": "woocommerce", "products": [{"SKU": "A"}]}
    )

    assert result == {"job_id": "job-9", "status": "completed", "catalog_id": "cat-1"}
    assert seen["payload"].products == [{"SKU": "A"}]
    assert catalog_job_task.process_catalog_job.max_retries == 0
