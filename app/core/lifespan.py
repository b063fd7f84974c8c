from contextlib import asynccontextmanager

from fastapi import FastAPI

from core.aws_client import validate_aws_credentials
from core.config import settings
from core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup. AWS clients are created lazily per job, so
    startup only reports which credentials and targets are in effect.
    """
    validate_aws_credentials()
    logger.info(
        "Lifespan startup: region=%s bucket=%s block_size=%d visibility_timeout=%d",
        settings.TARGET_AWS_REGION,
        settings.F5_S3_BUCKET_NAME,
        settings.F5_BLOCK_SIZE,
        settings.F5_VISIBILITY_TIMEOUT,
    )
    yield
    logger.info("Lifespan shutdown.")
