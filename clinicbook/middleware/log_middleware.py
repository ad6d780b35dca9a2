import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from clinicbook.core.logger import logger

class LogMiddleware(BaseHTTPMiddleware):
    """Logs every request and reports its duration in ``X-Process-Time``."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        query = f"?{request.url.query}" if request.url.query else ""
        logger.log(
            level,
            f"{request.method} {request.url.path}{query} -> {response.status_code} ({elapsed:.4f}s)"
        )
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response
