"""Request ID middleware for the read API."""

import re
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from structlog.contextvars import bind_contextvars, clear_contextvars

REQUEST_ID_HEADER = "X-Request-ID"

# UUIDs, proxy-generated hex IDs and short dotted or colon separated tokens
_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._:-]{0,127}")


def request_id_from(request: Request) -> str:
    """Reuse a well-formed incoming request ID or mint a new UUID."""
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_PATTERN.fullmatch(incoming):
        return incoming
    return str(uuid.uuid4())


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Tags every request with an ID shared by its logs and its response.

    The ID is bound as ``request_id`` in the structlog context, stored on
    ``request.state.correlation_id`` for handlers and error responses, and
    echoed back in the ``X-Request-ID`` header.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        clear_contextvars()

        request_id = request_id_from(request)
        bind_contextvars(request_id=request_id, path=request.url.path)
        request.state.correlation_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
