from dataclasses import dataclass

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


@dataclass(slots=True)
class RequestContext:
    """Per-request transport metadata; services receive an ``AuthContext`` instead."""

    request_id: str
    dealership_id: str | None = None


def bind_dealership(request: Request, dealership_id: str) -> None:
    context = getattr(request.state, "context", None)
    if isinstance(context, RequestContext):
        context.dealership_id = dealership_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[no-untyped-def]
        request.state.context = RequestContext(request_id=getattr(request.state, "correlation_id", None) or "")
        response = await call_next(request)
        response.headers["x-request-id"] = request.state.context.request_id
        return response
