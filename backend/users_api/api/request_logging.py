"""Request Logging Middleware — one access-log line per request.

Invariants:
    - Logged after the response is produced, with status_code and duration_ms
    - A request whose handler raised is still logged, with status_code 500
    - Query strings are never logged (paths only)
"""

import logging
import time

from fastapi import Request

logger = logging.getLogger("users_api.access")


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(
            f"{request.method} {request.url.path} {status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "client": request.client.host if request.client else None,
            },
        )
