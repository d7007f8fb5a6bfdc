"""
Middleware Package

Contains FastAPI middleware for:
- Prometheus metrics collection
- Per-request timeouts
- Per-client rate limiting
- Security response headers
"""

from jobboard.middleware.metrics import (
    PrometheusMiddleware,
    setup_metrics,
    REQUEST_LATENCY,
    REQUEST_COUNT,
    IN_FLIGHT,
    APPLICATIONS_CREATED,
    APPLICATION_STATUS_CHANGES,
    NOTIFICATION_FAILURES,
)
from jobboard.middleware.rate_limit import FixedWindowRateLimiter, RateLimitMiddleware
from jobboard.middleware.security_headers import SecurityHeadersMiddleware
from jobboard.middleware.timeout import TimeoutMiddleware

__all__ = [
    "PrometheusMiddleware",
    "setup_metrics",
    "TimeoutMiddleware",
    "FixedWindowRateLimiter",
    "RateLimitMiddleware",
    "SecurityHeadersMiddleware",
    "REQUEST_LATENCY",
    "REQUEST_COUNT",
    "IN_FLIGHT",
    "APPLICATIONS_CREATED",
    "APPLICATION_STATUS_CHANGES",
    "NOTIFICATION_FAILURES",
]
