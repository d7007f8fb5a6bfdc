"""
Prometheus Metrics Middleware

Provides request/response metrics for monitoring:
- HTTP request latency
- Request count by endpoint and status
- In-flight request gauge
- Application workflow counters (applications, status changes,
  notification delivery failures)

Usage:
    from jobboard.middleware.metrics import setup_metrics

    app = FastAPI()
    setup_metrics(app)

Metrics Endpoint:
    GET /metrics - Prometheus-format metrics
"""

import time
import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CONTENT_TYPE_LATEST,
    generate_latest,
    REGISTRY,
)
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# ==================== Prometheus Metrics ====================

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

IN_FLIGHT = Gauge(
    "http_requests_in_flight",
    "Requests currently being handled",
    ["method"]
)

APPLICATIONS_CREATED = Counter(
    "jobboard_applications_created_total",
    "Applications submitted"
)

APPLICATION_STATUS_CHANGES = Counter(
    "jobboard_application_status_changes_total",
    "Application status updates",
    ["status"]
)

NOTIFICATIONS_SENT = Counter(
    "jobboard_notifications_sent_total",
    "Notifications written",
    ["type"]
)

NOTIFICATION_FAILURES = Counter(
    "jobboard_notification_failures_total",
    "Notification inserts that failed and were dropped"
)

UNMATCHED_ROUTE = "unmatched"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Records latency and count per route template (/api/jobs/{job_id}, not
    the concrete path) and the number of in-flight requests per method.
    Requests that match no route share the "unmatched" label.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        status = "500"
        started = time.perf_counter()
        IN_FLIGHT.labels(method=method).inc()
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            IN_FLIGHT.labels(method=method).dec()
            endpoint = route_template(request)
            REQUEST_LATENCY.labels(method=method, endpoint=endpoint, status=status).observe(
                time.perf_counter() - started
            )
            REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=status).inc()


def route_template(request: Request) -> str:
    # The router stores the matched route in the shared scope
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


def metrics_endpoint(request: Request) -> Response:
    return PlainTextResponse(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


def setup_metrics(app: FastAPI) -> None:
    app.add_middleware(PrometheusMiddleware)
    app.add_route("/metrics", metrics_endpoint, methods=["GET"])
    logger.info("Prometheus metrics configured")


# ==================== Helper Functions ====================

def record_application_created() -> None:
    APPLICATIONS_CREATED.inc()


def record_status_change(status: str) -> None:
    APPLICATION_STATUS_CHANGES.labels(status=status).inc()


def record_notification_sent(notification_type: str) -> None:
    NOTIFICATIONS_SENT.labels(type=notification_type).inc()


def record_notification_failure() -> None:
    NOTIFICATION_FAILURES.inc()
