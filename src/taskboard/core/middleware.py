"""HTTP middleware binding request correlation and emitting access logs."""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .context import REQUEST_ID_HEADER, UNSET, bind_request_id, reset_request_id

access_logger = logging.getLogger("taskboard.access")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every request with an ``X-Request-ID`` and log one line when it completes.

    An incoming header value is reused so callers can correlate across
    services; otherwise a fresh identifier is generated.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self._header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self._header_name) or uuid.uuid4().hex
        request.state.request_id = request_id
        token = bind_request_id(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers.setdefault(self._header_name, request_id)
            # The endpoint runs in a child task; its context vars are not visible here.
            identity = getattr(request.state, "identity", None)
            access_logger.info(
                "%s %s -> %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "user_id": identity.user_id if identity is not None else UNSET,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            return response
        finally:
            reset_request_id(token)


__all__ = ["RequestContextMiddleware"]
