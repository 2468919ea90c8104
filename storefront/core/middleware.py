"""Request logging middleware for Storefront."""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that logs one structured event per request.

    Logs:
    - method, path and response status
    - request duration in milliseconds
    - a request id, echoed back in the ``X-Request-ID`` header when enabled
    """

    def __init__(self, app, *, logger, service_name: str = "storefront", add_request_id_header: bool = True):
        super().__init__(app)
        self.logger = logger
        self.service_name = service_name
        self.add_request_id_header = add_request_id_header

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self.logger.error(
                "Unhandled error while serving request",
                service=self.service_name,
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                exc_info=True,
            )
            raise

        self.logger.info(
            "Request served",
            service=self.service_name,
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        if self.add_request_id_header:
            response.headers["X-Request-ID"] = request_id
        return response
