import time
from fastapi import FastAPI, Request
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from routers.router import router
from core.lifespan import lifespan
from core.logger import logger
from core.rate_limiter import limiter

# Initialize FastAPI app
app = FastAPI(
    title="Untwister Dispatch",
    description="""
    Distributed PRNG seed recovery: splits a job's seed space into blocks and
    fans them out to a per-job SQS FIFO queue for the worker fleet.

    ## Endpoints

    **POST /api/v1/jobs** - Submit a job

    ### Request Body:
    - `observations` (required): Observed PRNG outputs, in order
    - `prng` (required): One of `glibc-rand`, `java`, `mt19937`, `php-mt_rand`, `ruby-rand`
    - `depth` (optional): Search depth, defaults to 0

    ### Response:
    - `202` with the job and its assigned `job_id`; dispatch continues in the background
    - `400` `{"error": "unsupported prng"}` for unknown families

    **GET /api/v1/jobs/{job_id}/summary** - Block and batch counts once dispatch finished
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Request/Response logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    log_data = {
        "method": request.method,
        "path": request.url.path,
        "status_code": response.status_code,
        "duration_ms": int(duration * 1000),
        "client": request.client.host if request.client else "unknown"
    }

    # Only log non-health-check requests
    if request.url.path != "/api/v1/health":
        logger.info(f"Request: {log_data}")

    return response

# Include routers
app.include_router(router)

# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    return {
        "service": "Untwister Dispatch",
        "version": "1.0.0",
        "status": "running",
        "documentation": "/docs"
    }
