# app/integrations/sqs_client.py
from typing import List, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from core.aws_client import get_sqs_client
from core.exceptions import BatchPublishFailure, QueueCreationFailure
from core.logger import logger
from schemas.sqs_models import BatchEntry, BatchPublishOutcome, QueueAttributes

SQS_BATCH_SEND_LIMIT = 10
FIFO_SUFFIX = ".fifo"


def queue_name_for(job_id: str, prefix: str) -> str:
    # SQS only treats a queue as FIFO when its name ends in ".fifo"
    return f"{prefix}{job_id}{FIFO_SUFFIX}"


class QueueGateway(Protocol):
    """Interface for the work-queue transport."""

    def create_queue(self, name: str, attributes: QueueAttributes) -> str:
        """Create (or resolve) a queue and return its URL."""
        ...

    def publish_batch(self, queue_url: str, entries: List[BatchEntry]) -> BatchPublishOutcome:
        """Send 1..10 entries in a single call."""
        ...


class SqsQueueGateway:
    """QueueGateway backed by SQS FIFO queues."""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_sqs_client()
        return self._client

    def create_queue(self, name: str, attributes: QueueAttributes) -> str:
        params = {
            "QueueName": name,
            "Attributes": {
                "VisibilityTimeout": str(attributes.visibility_timeout_seconds),
                "MessageRetentionPeriod": str(attributes.retention_seconds),
            },
        }
        if attributes.ordered_and_deduplicating:
            params["Attributes"]["FifoQueue"] = "true"

        logger.info("Creating SQS queue with name: %s", name)
        try:
            # CreateQueue is idempotent for identical attributes
            resp = self.client.create_queue(**params)
        except (ClientError, BotoCoreError) as e:
            raise QueueCreationFailure(f"Error creating queue {name}: {e}") from e
        return resp["QueueUrl"]

    def publish_batch(self, queue_url: str, entries: List[BatchEntry]) -> BatchPublishOutcome:
        if not 1 <= len(entries) <= SQS_BATCH_SEND_LIMIT:
            raise ValueError(
                f"SQS batch must hold 1..{SQS_BATCH_SEND_LIMIT} entries, got {len(entries)}"
            )
        try:
            resp = self.client.send_message_batch(
                QueueUrl=queue_url,
                Entries=[
                    {
                        "Id": entry.entry_id,
                        "MessageBody": entry.body,
                        "MessageGroupId": entry.group_token,
                        "MessageDeduplicationId": entry.dedup_token,
                    }
                    for entry in entries
                ],
            )
        except (ClientError, BotoCoreError) as e:
            raise BatchPublishFailure(f"Error in batch SQS send: {e}") from e

        return BatchPublishOutcome(
            successful=[item["Id"] for item in resp.get("Successful", [])],
            failed=[item["Id"] for item in resp.get("Failed", [])],
        )
