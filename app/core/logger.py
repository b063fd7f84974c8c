# app/core/logger.py
import logging
from core.config import settings

logger = logging.getLogger("untwister-dispatch")
logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
logger.propagate = False

# Always add a console handler with a simple, structured-ish format
_console = logging.StreamHandler()
_console.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
_console.setFormatter(logging.Formatter(
    fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
))
logger.addHandler(_console)


def job_log(job_id: str, level: int, pattern: str, *args) -> None:
    """Log a line tagged with the job it belongs to: `[job_id] message`."""
    logger.log(level, "[%s] " + pattern, job_id, *args)
