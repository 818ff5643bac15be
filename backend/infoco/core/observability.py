"""
Prometheus instrumentation for the Infoco API.

This module sets up:
- Request counters and latency histogram
- Outbound AI call counter
- The /metrics endpoint
"""

from __future__ import annotations

import re
import time

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware


http_requests_total = Counter(
    "http_server_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

http_request_duration_seconds = Histogram(
    "http_server_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)

http_exceptions_total = Counter(
    "http_server_exceptions_total",
    "Total unhandled exceptions",
    ["method", "path", "exception_type"],
)

infoco_ai_requests_total = Counter(
    "infoco_ai_requests_total",
    "Calls to the generative AI backend by endpoint and outcome",
    ["endpoint", "outcome"],
)


def record_ai_call(endpoint: str, outcome: str) -> None:
    infoco_ai_requests_total.labels(endpoint=endpoint, outcome=outcome).inc()


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Counts and times every request except scrapes of /metrics."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        except Exception as exc:
            http_exceptions_total.labels(method=method, path=path, exception_type=type(exc).__name__).inc()
            raise
        finally:
            http_requests_total.labels(method=method, path=path, status=status).inc()
            http_request_duration_seconds.labels(method=method, path=path).observe(time.perf_counter() - start)


# Municipality names appear as path segments in the document routes.
_MUNICIPALITY_PATH = re.compile(r"^(/api/(?:documents|payment-notes))/[^/]+")


def normalize_path(path: str) -> str:
    """Collapse ids and municipality names to keep label cardinality bounded."""
    normalized = _MUNICIPALITY_PATH.sub(r"\1/{municipality}", path)
    normalized = re.sub(r"/\d+(?=/|$)", "/{id}", normalized)
    return "/".join(normalized.split("/")[:6])


async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics endpoint handler."""
    return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
