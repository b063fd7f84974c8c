"""Shared fakes for the dispatch tests.

No AWS calls are made anywhere in the suite: the queue gateway and summary
store are replaced by in-memory recorders, and the boto3 clients used by the
real adapters are MagicMocks.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import pytest

from core.exceptions import BatchPublishFailure, QueueCreationFailure, SummaryWriteFailure
from core.rate_limiter import limiter
from schemas.sqs_models import BatchEntry, BatchPublishOutcome, Job, QueueAttributes


class FakeQueueGateway:
    """Records every call; can be told to fail specific batches (1-based)."""

    def __init__(
        self,
        *,
        fail_create: bool = False,
        fail_batches: Iterable[int] = (),
        reject_entries: Optional[dict] = None,
    ) -> None:
        self.fail_create = fail_create
        self.fail_batches = set(fail_batches)
        self.reject_entries = reject_entries or {}
        self.created: List[tuple] = []
        self.published: List[List[BatchEntry]] = []

    def create_queue(self, name: str, attributes: QueueAttributes) -> str:
        self.created.append((name, attributes))
        if self.fail_create:
            raise QueueCreationFailure("AccessDenied")
        return f"https://sqs.us-east-1.amazonaws.com/000000000000/{name}"

    def publish_batch(self, queue_url: str, entries: List[BatchEntry]) -> BatchPublishOutcome:
        self.published.append(list(entries))
        batch_no = len(self.published)
        if batch_no in self.fail_batches:
            raise BatchPublishFailure("ServiceUnavailable")
        rejected = self.reject_entries.get(batch_no, 0)
        ids = [e.entry_id for e in entries]
        return BatchPublishOutcome(successful=ids[rejected:], failed=ids[:rejected])


class FakeSummaryStore:
    def __init__(self, *, fail_write: bool = False) -> None:
        self.fail_write = fail_write
        self.objects: dict = {}

    def write(self, segments: Sequence[str], filename: str, data: bytes) -> None:
        if self.fail_write:
            raise SummaryWriteFailure("NoSuchBucket")
        self.objects["/".join([*segments, filename])] = data

    def read(self, segments: Sequence[str], filename: str) -> Optional[bytes]:
        return self.objects.get("/".join([*segments, filename]))


@pytest.fixture
def job() -> Job:
    return Job(
        job_id="0f5e2a7c9b8d4e6f1a2b3c4d5e6f7a8b",
        observations=[1804289383, 846930886, 1681692777],
        prng="glibc-rand",
        depth=1000,
    )


@pytest.fixture
def gateway() -> FakeQueueGateway:
    return FakeQueueGateway()


@pytest.fixture
def store() -> FakeSummaryStore:
    return FakeSummaryStore()


@pytest.fixture(autouse=True)
def _no_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True
