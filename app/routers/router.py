# routers/router.py
"""
FastAPI Router for job intake and dispatch summaries
"""

import json
import secrets

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    HTTPException,
    Request,
    status
)
from fastapi.responses import JSONResponse

from core.config import settings
from core.logger import logger
from core.rate_limiter import limit_param, limiter
from integrations.s3_client import S3SummaryStore
from schemas.request_models import (
    ErrorResponse,
    HealthResponse,
    JobAcceptedResponse,
    JobRequest,
    SummaryResponse,
)
from schemas.sqs_models import Job
from services.dispatch_service import DispatchCoordinator, build_dispatch_coordinator
from services.seed_space import seed_space


# ============================================================================
# ROUTER CONFIGURATION
# ============================================================================

router = APIRouter(
    prefix="/api/v1",
    tags=["Dispatch"],
    responses={
        429: {"description": "Too Many Requests"},
        500: {"description": "Internal Server Error"}
    }
)


def get_coordinator() -> DispatchCoordinator:
    return build_dispatch_coordinator()


def get_summary_store() -> S3SummaryStore:
    return S3SummaryStore()


def generate_job_id() -> str:
    return secrets.token_hex(16)


# ============================================================================
# HEALTH CHECK ENDPOINTS
# ============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Service Health Check",
    description="Validates SQS and S3 connectivity"
)
@limiter.limit(limit_param)
async def check_health(request: Request) -> HealthResponse:
    health_status = HealthResponse(
        status="healthy",
        message="Untwister dispatch is operational",
        supported_prngs=seed_space.families(),
    )

    try:
        from core.aws_client import get_sqs_client
        get_sqs_client().list_queues(QueueNamePrefix=settings.F5_QUEUE_PREFIX, MaxResults=1)
        health_status.sqs_status = "connected"
    except Exception as e:
        logger.error(f"SQS health check failed: {e}")
        health_status.sqs_status = f"error: {str(e)[:100]}"
        health_status.status = "degraded"

    try:
        from core.aws_client import get_s3_client
        get_s3_client().head_bucket(Bucket=settings.F5_S3_BUCKET_NAME)
        health_status.s3_status = "connected"
    except Exception as e:
        logger.error(f"S3 health check failed: {e}")
        health_status.s3_status = f"error: {str(e)[:100]}"
        health_status.status = "degraded"

    return health_status


# ============================================================================
# JOB ENDPOINTS
# ============================================================================

@router.post(
    "/jobs",
    response_model=JobAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit Seed Recovery Job",
    description="Validate a job, assign it an id and dispatch its seed blocks in the background",
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(limit_param)
async def submit_job(
    request: Request,
    body: JobRequest,
    background_tasks: BackgroundTasks,
    coordinator: DispatchCoordinator = Depends(get_coordinator),
):
    """
    Submit a job for dispatch.

    Process:
    1. Rejects unknown PRNG families with 400
    2. Immediately returns the job with 202 Accepted
    3. Partitions and publishes the seed space in the background

    Dispatch failures after this point are only visible in the logs.
    """
    if not seed_space.is_supported(body.prng):
        logger.info(f"Rejected job for unsupported prng={body.prng!r}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="unsupported prng").model_dump(),
        )

    job = Job(
        job_id=generate_job_id(),
        observations=body.observations,
        prng=body.prng,
        depth=body.depth,
    )
    logger.info(f"Accepted job: job_id={job.job_id}, prng={job.prng}, depth={job.depth}")

    # Sync function, so Starlette runs it in the threadpool after the response
    background_tasks.add_task(coordinator.run, job)

    return JobAcceptedResponse(
        job_id=job.job_id,
        observations=list(job.observations),
        prng=job.prng,
        depth=job.depth,
    )


@router.get(
    "/jobs/{job_id}/summary",
    response_model=SummaryResponse,
    status_code=status.HTTP_200_OK,
    summary="Dispatch Summary",
    description="Block and batch counts recorded when a job finished dispatching"
)
@limiter.limit(limit_param)
async def get_job_summary(
    request: Request,
    job_id: str,
    store: S3SummaryStore = Depends(get_summary_store),
) -> SummaryResponse:
    try:
        data = store.read([job_id], settings.SUMMARY_FILE_NAME)
    except Exception as e:
        logger.exception(f"Summary read failed: job_id={job_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to read summary: {str(e)}"
        )

    if data is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No summary for job {job_id}"
        )

    return SummaryResponse(**json.loads(data))
