from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp
from famcal.core.config import settings

# Methods that carry an event, category or member body
BODY_METHODS = {"POST", "PUT", "PATCH"}

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to JSON API responses."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self.security_headers = {
            "X-Frame-Options": "DENY",
            "X-Content-Type-Options": "nosniff",
            "Strict-Transport-Security": f"max-age={settings.HSTS_MAX_AGE}; includeSubDomains",
            "Referrer-Policy": "no-referrer"
        }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(self.security_headers)
        return response

class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject write requests whose declared body exceeds ``MAX_CONTENT_LENGTH``."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self.max_content_length = settings.MAX_CONTENT_LENGTH

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method in BODY_METHODS:
            content_length = request.headers.get("content-length", "")
            if content_length.isdigit() and int(content_length) > self.max_content_length:
                return Response(status_code=413, content="Request too large")
        return await call_next(request)
