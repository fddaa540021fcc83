import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

CORS_REJECTED_MESSAGE = "Not allowed by CORS"
PAYLOAD_TOO_LARGE_MESSAGE = "Payload too large"


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """Reject browser requests from origins outside the allow-list.

    Requests without an Origin header (curl, server-to-server) always pass.
    An empty allow-list admits every origin.
    """

    def __init__(self, app: ASGIApp, allowed_origins: list[str]) -> None:
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request.headers.get("origin")
        if origin and self.allowed_origins and origin not in self.allowed_origins:
            logger.info("Rejected request from origin %s", origin)
            return JSONResponse(status_code=403, content={"error": CORS_REJECTED_MESSAGE})
        return await call_next(request)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Short-circuit requests that declare a body larger than max_bytes.

    Chunked bodies carry no Content-Length; handlers still check the bytes
    they actually read.
    """

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.max_bytes:
            return JSONResponse(status_code=413, content={"error": PAYLOAD_TOO_LARGE_MESSAGE})
        return await call_next(request)
