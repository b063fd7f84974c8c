# app/integrations/s3_client.py
import posixpath
from typing import Optional, Protocol, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from core.aws_client import get_s3_client
from core.config import settings
from core.exceptions import SummaryWriteFailure
from core.logger import logger

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


def object_key(segments: Sequence[str], filename: str) -> str:
    return posixpath.join(*segments, filename)


class SummaryStore(Protocol):
    """Interface for the object store holding per-job dispatch summaries."""

    def write(self, segments: Sequence[str], filename: str, data: bytes) -> None:
        ...

    def read(self, segments: Sequence[str], filename: str) -> Optional[bytes]:
        ...


class S3SummaryStore:
    """SummaryStore backed by a single S3 bucket."""

    def __init__(self, client=None, bucket: Optional[str] = None):
        self._client = client
        self.bucket = bucket or settings.F5_S3_BUCKET_NAME

    @property
    def client(self):
        if self._client is None:
            self._client = get_s3_client()
        return self._client

    def write(self, segments: Sequence[str], filename: str, data: bytes) -> None:
        key = object_key(segments, filename)
        logger.info("s3 write -> s3://%s/%s", self.bucket, key)
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType="application/json",
            )
        except (ClientError, BotoCoreError) as e:
            raise SummaryWriteFailure(f"S3 write failed for {key}: {e}") from e

    def read(self, segments: Sequence[str], filename: str) -> Optional[bytes]:
        """Return the object body, or None when the key does not exist."""
        key = object_key(segments, filename)
        logger.info("s3 read <- s3://%s/%s", self.bucket, key)
        try:
            resp = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _MISSING_CODES:
                return None
            raise
        return resp["Body"].read()
