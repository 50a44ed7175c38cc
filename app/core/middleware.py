"""
Middleware components for the product catalog service.

Provides request logging and request id propagation.
"""

import time
import logging
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .request_context import new_request_id, set_request_id, clear_request_context
from ..shared.exceptions.handlers import general_exception_handler

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Request logging middleware"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Log the request, time it and tag the response with its request id.

        An incoming X-Request-ID header is reused so callers can correlate
        their own logs with ours. Unhandled exceptions are rendered here so
        a 500 carries the same id and headers as any other response.
        """
        start_time = time.time()
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        set_request_id(request_id)

        logger.info(f"Request [{request_id}]: {request.method} {request.url.path}")

        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                response = await general_exception_handler(request, exc)

            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = f"{process_time:.6f}"
            response.headers[REQUEST_ID_HEADER] = request_id

            logger.info(
                f"Response [{request_id}]: {request.method} {request.url.path} "
                f"- Status: {response.status_code} - Time: {process_time:.3f}s"
            )

            return response
        finally:
            clear_request_context()
