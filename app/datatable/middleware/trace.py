from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp


def resolve_trace_id(request: Request, header_name: str) -> str:
    incoming = (request.headers.get(header_name) or "").strip()
    return incoming or uuid.uuid4().hex


class TraceIdMiddleware(BaseHTTPMiddleware):
    """Tags each request with a trace id read from or echoed to ``header_name``.

    The id lands on ``request.state.trace_id`` where error bodies and the
    request log pick it up; ``error_code``/``error_class`` start out empty
    and are filled in by the exception handlers.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Trace-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        trace_id = resolve_trace_id(request, self.header_name)
        request.state.trace_id = trace_id
        request.state.error_code = None
        request.state.error_class = None
        response: Response = await call_next(request)
        response.headers[self.header_name] = trace_id
        return response
