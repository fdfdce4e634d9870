import os

from flask import request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Global Limiter instance to be imported by controllers.
# create_app() binds it and disables it in test mode when RATE_LIMIT_ENABLED=0.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per hour", "200 per minute"],
    storage_uri=os.getenv("LIMITER_STORAGE_URI", "memory://"),
    enabled=True,
)

READ_LIMIT = "100 per minute"
WRITE_LIMIT = "30 per minute"
LOGIN_LIMIT = "10 per minute"

MONITORING_PATHS = frozenset({"/health", "/metrics", "/pool-metrics"})


@limiter.request_filter
def exempt_monitoring_paths() -> bool:
    """Probes and scrapers are never rate limited."""
    return request.path in MONITORING_PATHS
