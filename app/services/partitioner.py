"""
Carves a job's seed space into contiguous blocks.

Blocks are produced lazily: the java seed space alone is ~9.2e13 blocks at the
default size, so nothing here may materialize the whole sequence.
"""

import logging
from typing import Any, Iterator

from core.config import DEFAULT_BLOCK_SIZE
from core.logger import job_log
from schemas.sqs_models import Block, Job


def resolve_block_size(block_size: Any) -> int:
    """Return `block_size` when it is a positive integer, else the default."""
    if isinstance(block_size, bool) or not isinstance(block_size, int) or block_size <= 0:
        return DEFAULT_BLOCK_SIZE
    return block_size


def block_count(bound: int, block_size: int) -> int:
    """Number of blocks `partition` yields for `bound`."""
    if bound <= 0:
        return 0
    return -(-bound // resolve_block_size(block_size))


def partition(job: Job, bound: int, block_size: Any = DEFAULT_BLOCK_SIZE) -> Iterator[Block]:
    """
    Yield blocks [0, n), [n, 2n), ... in ascending order until `bound` is covered.

    The last block is not clamped, so its `max_seed` may overshoot `bound`;
    workers stop at the real bound. Same inputs always give the same sequence,
    which is what makes re-dispatching a job after a crash possible.
    """
    size = resolve_block_size(block_size)
    if size != block_size:
        job_log(job.job_id, logging.WARNING,
                "Invalid block size %r, using default %d", block_size, size)

    min_seed = 0
    while min_seed < bound:
        max_seed = min_seed + size
        yield Block(
            job_id=job.job_id,
            observations=job.observations,
            prng=job.prng,
            depth=job.depth,
            min_seed=min_seed,
            max_seed=max_seed,
        )
        min_seed = max_seed
