"""
Request timeout middleware.

Bounds every request by ``request_timeout_seconds`` and answers 504 when
a slow database or Redis call holds it past that. ``/health`` is
excluded so probes report the real state of the dependencies.
"""

import asyncio

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

_UNBOUNDED_PATHS = ("/health",)


def _timeout_response() -> JSONResponse:
    # Same envelope as the FeedbackError handler in api.app
    return JSONResponse(
        status_code=504,
        content={"detail": "Request timed out", "error_type": "timeout"},
    )


class TimeoutMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, timeout_seconds: float = 30.0):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.startswith(_UNBOUNDED_PATHS):
            return await call_next(request)

        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await call_next(request)
        except TimeoutError:
            logger.warning(
                "Request exceeded time budget",
                method=request.method,
                path=path,
                timeout_seconds=self.timeout_seconds,
            )
            return _timeout_response()
