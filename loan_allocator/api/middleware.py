"""Request tracing and HTTP latency metrics for the allocation API"""

import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from loan_allocator.infrastructure.observability.metrics import request_duration_histogram

REQUEST_ID_HEADER = "X-Request-ID"
UNMATCHED_ENDPOINT = "<unmatched>"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an id, reusing the caller's X-Request-ID when sent,
    and echo it back so allocation runs can be traced across services.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def get_request_id(request: Request) -> str:
    """Request id set by RequestIDMiddleware"""
    return getattr(request.state, "request_id", "unknown")


def endpoint_label(request: Request) -> str:
    """
    Route template the request matched, e.g. /v1/allocations/{run_id}.

    Raw paths would create one series per run id, so anything without a
    matched route shares a single label.
    """
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ENDPOINT)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request latency per method, route template and status"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint_label(request),
            status=response.status_code,
        ).observe(time.perf_counter() - start_time)

        return response
