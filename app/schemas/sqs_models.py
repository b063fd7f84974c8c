# app/schemas/sqs_models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Tuple

MESSAGE_RETENTION_SECONDS = 1209600  # 14 days, the SQS maximum


class Job(BaseModel):
    """Inbound job descriptor, read-only once dispatch begins."""
    model_config = ConfigDict(frozen=True)

    job_id: str = Field(..., min_length=1)
    observations: Tuple[int, ...]
    prng: str
    depth: int = Field(..., ge=0)


class Block(BaseModel):
    """A job plus the half-open seed range [min_seed, max_seed) a worker must test."""
    model_config = ConfigDict(frozen=True)

    job_id: str
    observations: Tuple[int, ...]
    prng: str
    depth: int
    min_seed: int
    max_seed: int

    def to_body(self) -> str:
        # Compact JSON, this is what the workers parse
        return self.model_dump_json()


class BatchEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry_id: str
    body: str
    group_token: str
    dedup_token: str


class QueueAttributes(BaseModel):
    visibility_timeout_seconds: int = Field(..., gt=0)
    retention_seconds: int = MESSAGE_RETENTION_SECONDS
    ordered_and_deduplicating: bool = True


class BatchPublishOutcome(BaseModel):
    """What the transport reported for one batch call."""
    successful: List[str] = []
    failed: List[str] = []


class DispatchSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    blocks: int
    batches: int

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")


class DispatchResult(BaseModel):
    """In-process record of how far one job got."""
    job_id: str
    state: str
    failure: Optional[str] = None
    queue_url: Optional[str] = None
    blocks: int = 0
    batches: int = 0
    failed_batches: int = 0
    failed_blocks: int = 0
    summary_written: bool = False
