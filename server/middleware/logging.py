"""
Request/response logging middleware

One structured line per request. request_id is merged in from the
contextvars bound by RequestIDMiddleware.
"""

import time
from fastapi import Request

from config import get_logger

logger = get_logger(__name__).bind(component="http")

# Scraped every few seconds; logging them drowns out real traffic
QUIET_PATHS = frozenset({"/metrics", "/api/health"})


async def log_requests(request: Request, call_next):
    """Log method, path, status and duration for each request"""
    if request.url.path in QUIET_PATHS:
        return await call_next(request)

    start_time = time.perf_counter()
    fields = {
        "method": request.method,
        "path": request.url.path,
        "query": request.url.query or None,
    }

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            "request failed",
            duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
            error=str(e),
            **fields,
        )
        raise

    log = logger.warning if response.status_code >= 500 else logger.info
    log(
        "request completed",
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
        **fields,
    )
    return response
