"""
Batch Publisher

Groups a job's blocks into SQS-sized batches and sends them one batch at a
time, in ascending seed order. A batch that fails to send is logged and
dropped; the remaining batches are still attempted. Nothing is retried here,
recovery is a re-run of the whole job.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol

from core.exceptions import BatchPublishFailure
from core.logger import job_log
from integrations.sqs_client import SQS_BATCH_SEND_LIMIT, QueueGateway
from schemas.sqs_models import BatchEntry, Block, Job

TOKEN_BYTES = 16  # 128-bit tokens, 32 hex chars


def random_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


# ============================================================================
# TOKEN STRATEGIES
# ============================================================================

class TokenStrategy(Protocol):
    def entry_id(self, block: Block) -> str: ...
    def group_token(self, block: Block) -> str: ...
    def dedup_token(self, block: Block) -> str: ...


class RandomTokens:
    """Three independent random tokens per entry."""

    def entry_id(self, block: Block) -> str:
        return random_token()

    def group_token(self, block: Block) -> str:
        return random_token()

    def dedup_token(self, block: Block) -> str:
        return random_token()


class DeterministicTokens(RandomTokens):
    """
    Dedup token derived from the block's identity, so a re-dispatched block
    inside the queue's 5 minute dedup window is dropped by SQS itself.
    Entry id and group token stay random.
    """

    def dedup_token(self, block: Block) -> str:
        key = f"{block.job_id}:{block.min_seed}:{block.max_seed}"
        return hashlib.sha256(key.encode("utf-8")).hexdigest()[:TOKEN_BYTES * 2]


# ============================================================================
# PUBLISHER
# ============================================================================

@dataclass
class PublishTally:
    blocks: int = 0
    batches: int = 0
    failed_batches: int = 0
    failed_blocks: int = 0


class BatchPublisher:
    def __init__(
        self,
        gateway: QueueGateway,
        tokens: Optional[TokenStrategy] = None,
        batch_size: int = SQS_BATCH_SEND_LIMIT,
    ):
        if not 1 <= batch_size <= SQS_BATCH_SEND_LIMIT:
            raise ValueError(f"batch_size must be within 1..{SQS_BATCH_SEND_LIMIT}")
        self.gateway = gateway
        self.tokens = tokens or RandomTokens()
        self.batch_size = batch_size

    def to_entry(self, block: Block) -> BatchEntry:
        return BatchEntry(
            entry_id=self.tokens.entry_id(block),
            body=block.to_body(),
            group_token=self.tokens.group_token(block),
            dedup_token=self.tokens.dedup_token(block),
        )

    def publish(self, job: Job, queue_url: str, blocks: Iterable[Block]) -> PublishTally:
        """
        Drain `blocks` into the queue.

        `blocks` and `batches` count every batch that was flushed, whether or
        not the transport accepted it; failures are counted separately.
        """
        tally = PublishTally()
        buffer: List[Block] = []

        for block in blocks:
            buffer.append(block)
            if len(buffer) == self.batch_size:
                self._flush(job, queue_url, buffer, tally)
                buffer = []

        if buffer:
            self._flush(job, queue_url, buffer, tally)

        return tally

    def _flush(self, job: Job, queue_url: str, batch: List[Block], tally: PublishTally) -> None:
        entries = [self.to_entry(block) for block in batch]
        batch_no = tally.batches + 1
        tally.blocks += len(entries)
        tally.batches += 1

        try:
            outcome = self.gateway.publish_batch(queue_url, entries)
        except BatchPublishFailure as e:
            tally.failed_batches += 1
            tally.failed_blocks += len(entries)
            job_log(
                job.job_id, logging.ERROR,
                "Batch %d dropped, seeds [%d, %d): %s",
                batch_no, batch[0].min_seed, batch[-1].max_seed, e,
            )
            return

        if outcome.failed:
            tally.failed_blocks += len(outcome.failed)
            job_log(
                job.job_id, logging.WARNING,
                "Batch %d partially rejected, %d of %d entries failed: %s",
                batch_no, len(outcome.failed), len(entries), ", ".join(outcome.failed),
            )
