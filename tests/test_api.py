"""API contract tests for job intake and summary read-back.

The coordinator and summary store are swapped for fakes through FastAPI's
dependency overrides; no AWS endpoint is contacted.
"""

from __future__ import annotations

import json
import re
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from conftest import FakeSummaryStore
from main import app
from routers.router import get_coordinator, get_summary_store
from schemas.sqs_models import Job


class RecordingCoordinator:
    def __init__(self) -> None:
        self.jobs: list[Job] = []

    def run(self, job: Job) -> None:
        self.jobs.append(job)


@pytest.fixture
def coordinator() -> RecordingCoordinator:
    return RecordingCoordinator()


@pytest.fixture
def summaries() -> FakeSummaryStore:
    return FakeSummaryStore()


@pytest.fixture
def client(coordinator, summaries):
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    app.dependency_overrides[get_summary_store] = lambda: summaries
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# POST /api/v1/jobs
# ---------------------------------------------------------------------------

class TestSubmitJob:

    def test_valid_job_returns_202_with_job_id(self, client, coordinator) -> None:
        resp = client.post(
            "/api/v1/jobs",
            json={"observations": [1804289383, 846930886], "prng": "glibc-rand", "depth": 1000},
        )

        assert resp.status_code == 202
        body = resp.json()
        assert re.fullmatch(r"[0-9a-f]{32}", body["job_id"])
        assert body["observations"] == [1804289383, 846930886]
        assert body["prng"] == "glibc-rand"
        assert body["depth"] == 1000

    def test_dispatch_is_handed_to_background(self, client, coordinator) -> None:
        resp = client.post("/api/v1/jobs", json={"observations": [5], "prng": "java", "depth": 0})

        [job] = coordinator.jobs
        assert job.job_id == resp.json()["job_id"]
        assert job.prng == "java"
        assert job.observations == (5,)

    def test_job_ids_are_unique(self, client) -> None:
        ids = {
            client.post("/api/v1/jobs", json={"observations": [1], "prng": "mt19937"}).json()["job_id"]
            for _ in range(5)
        }
        assert len(ids) == 5

    def test_depth_defaults_to_zero(self, client) -> None:
        resp = client.post("/api/v1/jobs", json={"observations": [1], "prng": "ruby-rand"})
        assert resp.status_code == 202
        assert resp.json()["depth"] == 0

    def test_unsupported_prng_returns_400(self, client, coordinator) -> None:
        resp = client.post("/api/v1/jobs", json={"observations": [1], "prng": "lcg48", "depth": 0})

        assert resp.status_code == 400
        assert resp.json() == {"error": "unsupported prng"}
        assert coordinator.jobs == []

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"prng": "java"},
            {"observations": [], "prng": "java"},
            {"observations": ["not-a-number"], "prng": "java"},
            {"observations": [1], "prng": "java", "depth": -1},
        ],
    )
    def test_malformed_body_returns_422(self, client, coordinator, payload) -> None:
        resp = client.post("/api/v1/jobs", json=payload)

        assert resp.status_code == 422
        assert coordinator.jobs == []


# ---------------------------------------------------------------------------
# GET /api/v1/jobs/{job_id}/summary
# ---------------------------------------------------------------------------

class TestJobSummary:

    def test_existing_summary(self, client, summaries) -> None:
        summaries.write(["abc"], "block-info.json", json.dumps({"blocks": 42950, "batches": 4295}).encode())

        resp = client.get("/api/v1/jobs/abc/summary")

        assert resp.status_code == 200
        assert resp.json() == {"blocks": 42950, "batches": 4295}

    def test_missing_summary_returns_404(self, client) -> None:
        resp = client.get("/api/v1/jobs/nope/summary")
        assert resp.status_code == 404

    def test_store_error_returns_500(self, client, summaries) -> None:
        summaries.read = MagicMock(side_effect=RuntimeError("throttled"))

        resp = client.get("/api/v1/jobs/abc/summary")
        assert resp.status_code == 500


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------

class TestHealth:

    def test_root(self, client) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["service"] == "Untwister Dispatch"

    def test_health_connected(self, client, monkeypatch) -> None:
        monkeypatch.setattr("core.aws_client.get_sqs_client", lambda: MagicMock())
        monkeypatch.setattr("core.aws_client.get_s3_client", lambda: MagicMock())

        body = client.get("/api/v1/health").json()

        assert body["status"] == "healthy"
        assert body["sqs_status"] == "connected"
        assert body["s3_status"] == "connected"
        assert "mt19937" in body["supported_prngs"]

    def test_health_degraded_when_sqs_unreachable(self, client, monkeypatch) -> None:
        sqs = MagicMock()
        sqs.list_queues.side_effect = RuntimeError("no route")
        monkeypatch.setattr("core.aws_client.get_sqs_client", lambda: sqs)
        monkeypatch.setattr("core.aws_client.get_s3_client", lambda: MagicMock())

        body = client.get("/api/v1/health").json()

        assert body["status"] == "degraded"
        assert body["sqs_status"].startswith("error:")
        assert body["s3_status"] == "connected"
