# schemas/request_models.py
from pydantic import BaseModel, Field
from typing import List, Optional


# ============================================================================
# JOB INTAKE MODELS
# ============================================================================

class JobRequest(BaseModel):
    """
    Job submission from a client.
    The PRNG family is checked against the seed-space table by the router so
    that an unknown family maps to a 400 rather than a 422.
    """
    observations: List[int] = Field(..., min_length=1, description="Observed PRNG outputs, in order")
    prng: str = Field(..., description="PRNG family, e.g. 'mt19937'")
    depth: int = Field(0, ge=0, description="How many outputs deep to search past each seed")


class JobAcceptedResponse(BaseModel):
    """Echo of the accepted job with its assigned identifier"""
    job_id: str
    observations: List[int]
    prng: str
    depth: int


class ErrorResponse(BaseModel):
    error: str


class SummaryResponse(BaseModel):
    blocks: int
    batches: int


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    message: str
    sqs_status: Optional[str] = None
    s3_status: Optional[str] = None
    supported_prngs: List[str] = []
