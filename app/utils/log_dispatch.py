import json
from datetime import datetime, timezone
from core.logger import logger
from schemas.sqs_models import DispatchResult


def log_dispatch_result(result: DispatchResult, duration_ms: int) -> DispatchResult:
    """
    One structured line per finished job, for log-based dashboards.
    """
    log_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": "dispatch_complete",
        "job_id": result.job_id,
        "state": result.state,
        "failure": result.failure,
        "queue_url": result.queue_url,
        "blocks": result.blocks,
        "batches": result.batches,
        "failed_batches": result.failed_batches,
        "failed_blocks": result.failed_blocks,
        "summary_written": result.summary_written,
        "duration_ms": duration_ms,
    }

    # Anything short of a clean, summarized dispatch needs an operator re-run
    if result.failure or result.failed_blocks or not result.summary_written:
        log_data["event"] = "dispatch_incomplete"
        logger.warning(json.dumps(log_data))
    else:
        logger.info(json.dumps(log_data))

    return result
