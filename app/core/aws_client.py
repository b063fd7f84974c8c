# core/aws_client.py
"""
Centralized AWS client factory to ensure proper credential handling.
This module creates AWS clients with explicit credential configuration.
"""
import boto3
from botocore.config import Config
from core.config import settings
from core.logger import logger
import os


def _credentials():
    # Settings (which loads from .env) win over the raw environment
    return {
        "aws_access_key_id": settings.AWS_ACCESS_KEY_ID or os.getenv("AWS_ACCESS_KEY_ID"),
        "aws_secret_access_key": settings.AWS_SECRET_ACCESS_KEY or os.getenv("AWS_SECRET_ACCESS_KEY"),
        "aws_session_token": settings.AWS_SESSION_TOKEN or os.getenv("AWS_SESSION_TOKEN"),
    }


def get_sqs_client():
    """Get SQS client for the job queue region."""
    try:
        config = Config(
            connect_timeout=10,
            read_timeout=30,
        )
        client = boto3.client(
            "sqs",
            region_name=settings.TARGET_AWS_REGION,
            endpoint_url=settings.F5_SQS_ENDPOINT_URL,
            config=config,
            **_credentials(),
        )
        logger.info("SQS client initialized region=%s", settings.TARGET_AWS_REGION)
        return client
    except Exception as e:
        logger.error(f"Failed to initialize SQS client: {str(e)}")
        raise


def get_s3_client():
    """Get S3 client with proper credentials."""
    try:
        client = boto3.client(
            "s3",
            region_name=settings.TARGET_AWS_REGION,
            endpoint_url=settings.F5_S3_ENDPOINT_URL,
            **_credentials(),
        )
        logger.info("S3 client initialized with credentials")
        return client
    except Exception as e:
        logger.error(f"Failed to initialize S3 client: {str(e)}")
        raise


def validate_aws_credentials():
    """Validate that AWS credentials are properly configured."""
    creds = _credentials()

    if not creds["aws_access_key_id"] or not creds["aws_secret_access_key"]:
        logger.warning("No explicit AWS credentials in settings or environment")
        logger.info("Falling back to the boto3 default chain (shared config, instance or task role)")
        return False

    logger.info("AWS credentials found and validated")
    return True
