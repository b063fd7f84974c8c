# core/exceptions.py
"""
Failure taxonomy for job dispatch.

UnsupportedPRNG and QueueCreationFailure abort a job. BatchPublishFailure and
SummaryWriteFailure are logged and dispatch carries on.
"""

from typing import Optional


class DispatchError(Exception):
    """Base class for every classified dispatch failure."""

    fatal: bool = True

    def __init__(self, message: str, job_id: Optional[str] = None):
        super().__init__(message)
        self.job_id = job_id


class UnsupportedPRNG(DispatchError):
    def __init__(self, prng: str, job_id: Optional[str] = None):
        super().__init__(f"unsupported prng: {prng!r}", job_id=job_id)
        self.prng = prng


class QueueCreationFailure(DispatchError):
    pass


class BatchPublishFailure(DispatchError):
    fatal = False


class SummaryWriteFailure(DispatchError):
    fatal = False
