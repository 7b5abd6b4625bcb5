"""
Prometheus metrics middleware for API requests

Labels requests by the route template that served them
(/api/compare/{candidate_id}) so label cardinality stays bounded.
Unmatched paths fall back to a normalized form of the raw path.
"""

import time
from fastapi import Request

from server.metrics import metrics


async def metrics_middleware(request: Request, call_next):
    """Record request count and duration"""
    start_time = time.perf_counter()
    status_code = 500

    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        endpoint = _endpoint_label(request)
        metrics.api_requests.labels(
            endpoint=endpoint,
            method=request.method,
            status_code=status_code,
        ).inc()
        metrics.api_request_duration.labels(
            endpoint=endpoint,
            method=request.method,
        ).observe(time.perf_counter() - start_time)


def _endpoint_label(request: Request) -> str:
    # Starlette stores the matched route in the scope once routing has run
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    if template:
        return template
    return _normalize_endpoint(request.url.path)


def _normalize_endpoint(path: str) -> str:
    """Collapse numeric path segments to :id

    Converts:
        /api/compare/12 -> /api/compare/:id
        /api/unknown/abc -> /api/unknown/abc
    """
    parts = [part for part in path.split('/') if part]
    return '/' + '/'.join(':id' if part.isdigit() else part for part in parts)
