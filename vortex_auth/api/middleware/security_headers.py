"""
Security Headers Middleware

Adds security headers to all responses and strips headers that
fingerprint the server.
"""

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from vortex_auth.api.responses import internal_error_response

logger = logging.getLogger(__name__)

CSP_DIRECTIVES = {
    "default-src": "'self'",
    "script-src": "'self' 'unsafe-inline' 'unsafe-eval' https://unpkg.com",
    "style-src": "'self' 'unsafe-inline' https://unpkg.com",
    "img-src": "'self' data: https:",
    "font-src": "'self' data: https://unpkg.com",
    "connect-src": "'self' ws: wss:",
    "frame-ancestors": "'none'",
    "base-uri": "'self'",
    "form-action": "'self'",
}

HSTS_VALUE = "max-age=31536000; includeSubDomains; preload"

STRIPPED_HEADERS = ("Server", "X-Powered-By")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds security headers to all responses.

    Headers added:
    - Content-Security-Policy: self, plus the docs CDN
    - X-Frame-Options: Prevents clickjacking
    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-XSS-Protection: Legacy browser XSS filter
    - Referrer-Policy: Controls referrer information
    - Permissions-Policy: Disables camera, microphone, geolocation, payment
    - Strict-Transport-Security: only when the request came in over HTTPS
    """

    def __init__(self, app, csp_directives: dict = None):
        super().__init__(app)
        directives = csp_directives or CSP_DIRECTIVES
        self.csp_value = "; ".join(f"{key} {value}" for key, value in directives.items())

    @staticmethod
    def is_https(request: Request) -> bool:
        if request.url.scheme == "https":
            return True
        return request.headers.get("X-Forwarded-Proto", "").lower() == "https"

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            response = await call_next(request)
        except Exception:
            # Unhandled errors still leave with the headers below
            logger.exception(f"Unhandled error on {request.url.path}")
            response = internal_error_response()

        response.headers["Content-Security-Policy"] = self.csp_value
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = (
            "camera=(), microphone=(), geolocation=(), payment=()"
        )

        if self.is_https(request):
            response.headers["Strict-Transport-Security"] = HSTS_VALUE

        # uvicorn adds its own Server header after this; api.py turns it off
        for header in STRIPPED_HEADERS:
            if header in response.headers:
                del response.headers[header]

        return response
