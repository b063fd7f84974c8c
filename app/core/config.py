# core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationInfo, field_validator
from typing import Any, Optional


DEFAULT_BLOCK_SIZE = 100000  # seeds per block
DEFAULT_VISIBILITY_TIMEOUT = 60 * 30
DEFAULT_AWS_REGION = "us-east-1"


def _positive_int_or(value: Any, default: int) -> int:
    """Parse an integer override, falling back to `default` when unusable."""
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


class Settings(BaseSettings):
    """
    Centralized application configuration.
    Every value can be overridden from the environment or a local .env file.
    """

    # ------------------------------------------------------------
    # Project / Runtime
    # ------------------------------------------------------------
    PROJECT_NAME: str = "Untwister Dispatch"
    DEBUG: bool = False

    # HTTP / API
    RATE_LIMIT_MIN: str = "10"

    # ------------------------------------------------------------
    # AWS Core
    # ------------------------------------------------------------
    AWS_REGION: Optional[str] = None
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_SESSION_TOKEN: Optional[str] = None

    F5_TARGET_AWS_REGION: Optional[str] = Field(
        default=None,
        description="Region hosting the job queues; falls back to AWS_REGION",
    )

    # ------------------------------------------------------------
    # Partitioning
    # ------------------------------------------------------------

    """
    Number of candidate seeds carried by a single block.
    Non-numeric or non-positive overrides fall back to the default.
    """
    F5_BLOCK_SIZE: int = DEFAULT_BLOCK_SIZE

    # ------------------------------------------------------------
    # Messaging (SQS)
    # ------------------------------------------------------------
    F5_QUEUE_PREFIX: str = "f5_"
    F5_VISIBILITY_TIMEOUT: int = Field(
        default=DEFAULT_VISIBILITY_TIMEOUT,
        description="Seconds a received block stays hidden from other workers",
    )
    F5_SQS_ENDPOINT_URL: Optional[str] = Field(
        default=None,
        description="Custom SQS endpoint, e.g. 'http://localhost:4566' for LocalStack",
    )

    """
    Derive the dedup token of each block from (job_id, min_seed, max_seed)
    instead of drawing it at random, so a re-run job is collapsed by the
    FIFO queue's deduplication window.
    """
    F5_DETERMINISTIC_DEDUP: bool = False

    # ------------------------------------------------------------
    # S3 Storage
    # ------------------------------------------------------------
    F5_S3_BUCKET_NAME: str = "f5_untwister"
    F5_S3_ENDPOINT_URL: Optional[str] = None
    SUMMARY_FILE_NAME: str = "block-info.json"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("F5_BLOCK_SIZE", mode="before")
    @classmethod
    def _block_size_or_default(cls, value: Any) -> int:
        return _positive_int_or(value, DEFAULT_BLOCK_SIZE)

    @field_validator("F5_VISIBILITY_TIMEOUT", mode="before")
    @classmethod
    def _visibility_timeout_or_default(cls, value: Any) -> int:
        return _positive_int_or(value, DEFAULT_VISIBILITY_TIMEOUT)

    @field_validator("F5_S3_BUCKET_NAME", "F5_QUEUE_PREFIX", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value

    @property
    def TARGET_AWS_REGION(self) -> str:
        return self.F5_TARGET_AWS_REGION or self.AWS_REGION or DEFAULT_AWS_REGION


settings = Settings()
