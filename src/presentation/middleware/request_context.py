"""Request context middleware for tracing."""

import uuid
from contextvars import ContextVar
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return request_id_var.get()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that sets up request context.

    Generates or extracts a request ID, echoes it in the response headers,
    and binds it together with the acting user to every log line emitted
    while the request is handled.
    """

    HEADER_NAME = "X-Request-ID"
    USER_HEADER_NAME = "X-User-ID"

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid.uuid4())
        token = request_id_var.set(request_id)

        context = {"request_id": request_id}
        user_id = (request.headers.get(self.USER_HEADER_NAME) or "").strip()
        if user_id:
            context["user_id"] = user_id
        bound = structlog.contextvars.bind_contextvars(**context)

        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            return response
        finally:
            structlog.contextvars.reset_contextvars(**bound)
            request_id_var.reset(token)
