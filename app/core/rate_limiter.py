from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

# Per client address; job submissions fan out into thousands of SQS calls
limiter = Limiter(key_func=get_remote_address)
limit_param = f"{settings.RATE_LIMIT_MIN}/minute"
