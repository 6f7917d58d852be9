"""Request logging middleware for the context API."""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from stridematch.logging import bind_request_fields, clear_request_fields, log_api_request

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag every log event of a request with its id and log the outcome.

    A caller-supplied X-Request-ID is reused so the chat frontend can
    correlate its own logs with ours; otherwise a short id is generated.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        bind_request_fields(request_id=request_id)

        start_time = time.perf_counter()
        status_code = 500
        error = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as e:
            error = str(e)
            raise
        finally:
            log_api_request(
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=(time.perf_counter() - start_time) * 1000,
                error=error,
            )
            clear_request_fields()
