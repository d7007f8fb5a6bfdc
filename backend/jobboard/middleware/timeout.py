import asyncio
import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from jobboard.errors import RequestTimeout

logger = logging.getLogger(__name__)


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Abort requests that run longer than ``timeout`` seconds with a 504."""

    def __init__(self, app: FastAPI, timeout: float = 30.0):
        super().__init__(app)
        self.timeout = timeout

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Request timed out after {self.timeout}s: {request.method} {request.url.path}")
            return JSONResponse(
                status_code=RequestTimeout.status_code,
                content={"error": RequestTimeout.default_message},
            )
