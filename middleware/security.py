from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from collections import defaultdict, deque
from typing import Deque, Dict, NamedTuple
from config import Settings
import logging
import secrets
import time

logger = logging.getLogger(__name__)

class RateLimit(NamedTuple):
    max_requests: int
    window_seconds: int

# Sliding-window counter, per process
class RateLimiter:
    def __init__(self, idle_seconds: int = 300):
        self.hits: Dict[str, Deque[float]] = defaultdict(deque)
        self.idle_seconds = idle_seconds
        self.last_sweep = time.monotonic()

    def is_allowed(self, key: str, limit: RateLimit) -> bool:
        now = time.monotonic()
        if now - self.last_sweep > 60:
            self.sweep(now)

        window = self.hits[key]
        while window and window[0] <= now - limit.window_seconds:
            window.popleft()

        if len(window) >= limit.max_requests:
            return False
        window.append(now)
        return True

    def sweep(self, now: float):
        """Forget clients that have been quiet for a while"""
        for key in [k for k, window in self.hits.items() if not window or window[-1] < now - self.idle_seconds]:
            del self.hits[key]
        self.last_sweep = now

def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if forwarded:
        return forwarded
    return request.client.host if request.client else "unknown"

def too_many_requests(message: str, limit: RateLimit) -> Response:
    return Response(content=message, status_code=429, headers={"Retry-After": str(limit.window_seconds)})

class SecurityMiddleware(BaseHTTPMiddleware):
    """
    Per-IP rate limiting, request size limit, request ids and security headers
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings
        self.rate_limiter = RateLimiter()
        self.default_limit = RateLimit(settings.rate_limit_requests, settings.rate_limit_window_seconds)
        self.login_limit = RateLimit(settings.auth_rate_limit_requests, settings.auth_rate_limit_window_seconds)

    async def dispatch(self, request: Request, call_next):
        ip = client_ip(request)

        if not self.rate_limiter.is_allowed(ip, self.default_limit):
            logger.warning(f"Rate limit exceeded for {ip}")
            return too_many_requests("Rate limit exceeded. Please try again later.", self.default_limit)

        # Stricter limit on credential checks
        if request.url.path.startswith("/api/auth/login"):
            if not self.rate_limiter.is_allowed(f"{ip}:login", self.login_limit):
                logger.warning(f"Login rate limit exceeded for {ip}")
                return too_many_requests("Too many authentication attempts. Please try again later.", self.login_limit)

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.settings.max_request_bytes:
            logger.warning(f"Rejected {content_length} byte body from {ip}")
            return Response(content="Request body too large", status_code=413)

        request_id = request.headers.get("X-Request-ID") or secrets.token_hex(8)
        started = time.perf_counter()

        response = await call_next(request)

        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms} ms) [{request_id}]")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Relaxed CSP for the interactive API docs
        if request.url.path in ["/docs", "/redoc"] or request.url.path.startswith("/openapi"):
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "img-src 'self' data: https:; "
                "frame-ancestors 'none';"
            )
        else:
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "img-src 'self' data: https:; "
                "frame-ancestors 'none'; "
                "base-uri 'self';"
            )

        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response
