"""
Dispatch Service

Drives one job from submission to a fully populated work queue:

    CREATED -> QUEUE_READY -> PARTITIONING -> DISPATCHED -> SUMMARIZED

An unsupported PRNG stops the job at CREATED and a queue that cannot be
created stops it at QUEUE_READY; both are terminal and the result keeps that
state with `failure` naming the exception. A summary that cannot be written is
logged and the job still counts as dispatched, the work is already on the
queue. Classified failures never escape `run`; the caller has returned
long before dispatch finishes.
"""

import logging
import time
from enum import Enum
from typing import Optional

from core.config import settings
from core.exceptions import DispatchError, QueueCreationFailure, SummaryWriteFailure, UnsupportedPRNG
from core.logger import job_log
from integrations.s3_client import S3SummaryStore, SummaryStore
from integrations.sqs_client import QueueGateway, SqsQueueGateway, queue_name_for
from schemas.sqs_models import DispatchResult, DispatchSummary, Job, QueueAttributes
from services.batch_publisher import BatchPublisher, DeterministicTokens, RandomTokens, TokenStrategy
from services.partitioner import block_count, partition, resolve_block_size
from services.seed_space import SeedSpaceModel, seed_space
from utils.log_dispatch import log_dispatch_result


class DispatchState(str, Enum):
    CREATED = "created"
    QUEUE_READY = "queue_ready"
    PARTITIONING = "partitioning"
    DISPATCHED = "dispatched"
    SUMMARIZED = "summarized"


class DispatchCoordinator:
    def __init__(
        self,
        gateway: QueueGateway,
        store: SummaryStore,
        seeds: SeedSpaceModel = seed_space,
        block_size: int = settings.F5_BLOCK_SIZE,
        visibility_timeout: int = settings.F5_VISIBILITY_TIMEOUT,
        queue_prefix: str = settings.F5_QUEUE_PREFIX,
        summary_file: str = settings.SUMMARY_FILE_NAME,
        tokens: Optional[TokenStrategy] = None,
    ):
        self.gateway = gateway
        self.store = store
        self.seeds = seeds
        self.block_size = block_size
        self.visibility_timeout = visibility_timeout
        self.queue_prefix = queue_prefix
        self.summary_file = summary_file
        self.publisher = BatchPublisher(gateway, tokens=tokens)

    def run(self, job: Job) -> DispatchResult:
        start_time = time.time()
        result = self._run(job)
        return log_dispatch_result(result, int((time.time() - start_time) * 1000))

    def _run(self, job: Job) -> DispatchResult:
        result = DispatchResult(job_id=job.job_id, state=DispatchState.CREATED.value)
        job_log(job.job_id, logging.INFO,
                "Start job for '%s' with depth of '%d' ...", job.prng, job.depth)

        # Resolved before touching the queue so an unknown family costs no AWS calls
        try:
            bound = self.seeds.bound_for(job.prng, job_id=job.job_id)
        except UnsupportedPRNG as e:
            return self._fail(result, e, "Fatal error")
        job_log(job.job_id, logging.INFO, "Partitioning %d seeds into %d blocks of %d",
                bound, block_count(bound, self.block_size), resolve_block_size(self.block_size))

        try:
            result.queue_url = self.gateway.create_queue(
                queue_name_for(job.job_id, self.queue_prefix),
                QueueAttributes(visibility_timeout_seconds=self.visibility_timeout),
            )
        except QueueCreationFailure as e:
            result.state = DispatchState.QUEUE_READY.value
            return self._fail(result, e, "Fatal error no queue")
        result.state = DispatchState.QUEUE_READY.value
        job_log(job.job_id, logging.DEBUG, "Queue ready: %s", result.queue_url)

        result.state = DispatchState.PARTITIONING.value
        tally = self.publisher.publish(
            job, result.queue_url, partition(job, bound, self.block_size)
        )
        result.blocks = tally.blocks
        result.batches = tally.batches
        result.failed_batches = tally.failed_batches
        result.failed_blocks = tally.failed_blocks
        result.state = DispatchState.DISPATCHED.value
        job_log(job.job_id, logging.INFO,
                "Sent %d blocks in %d messages (%d batches failed)",
                tally.blocks, tally.batches, tally.failed_batches)

        summary = DispatchSummary(blocks=tally.blocks, batches=tally.batches)
        try:
            self.store.write([job.job_id], self.summary_file, summary.to_bytes())
        except SummaryWriteFailure as e:
            return self._fail(result, e, "Summary write failed")

        result.summary_written = True
        result.state = DispatchState.SUMMARIZED.value
        return result

    @staticmethod
    def _fail(result: DispatchResult, error: DispatchError, what: str) -> DispatchResult:
        # State stays where the job stopped
        level = logging.CRITICAL if error.fatal else logging.ERROR
        job_log(result.job_id, level, "%s: %s", what, error)
        if error.fatal:
            result.failure = type(error).__name__
        return result


def build_dispatch_coordinator() -> DispatchCoordinator:
    """Coordinator wired to the real SQS and S3 clients from settings."""
    tokens = DeterministicTokens() if settings.F5_DETERMINISTIC_DEDUP else RandomTokens()
    return DispatchCoordinator(
        gateway=SqsQueueGateway(),
        store=S3SummaryStore(),
        tokens=tokens,
    )
