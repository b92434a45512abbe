# app/core/middleware.py
"""
Core middleware registration for the FastAPI application.

Request ID and caller context come first, then timing and security headers.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.config.settings import settings
from app.core.exceptions import AuthenticationError
from app.core.logging import get_logger, request_id as request_id_var, user_id as user_id_var
from app.core.security import verify_token

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each incoming request.

    The request ID is:
    - Stored in request.state.request_id and the logging context
    - Added to response headers as X-Request-ID
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())

        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[self.header_name] = request_id
        return response


class AuthContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that puts the caller's user id into the logging context.

    The token is read from the bearer header first, then the auth cookie.
    Only the signature and expiry are checked here; route dependencies still
    decide whether the account may act. Requests with a missing or bad token
    pass through untouched.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        uid = None
        token = _request_token(request)
        if token:
            try:
                uid = verify_token(token)["sub"]
            except AuthenticationError:
                uid = None

        request.state.user_id = uid
        token_var = user_id_var.set(uid)
        try:
            return await call_next(request)
        finally:
            user_id_var.reset(token_var)


def _request_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that measures and logs request processing time.

    Adds X-Process-Time header to responses with the processing duration in seconds.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "Request completed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time": f"{process_time:.4f}s",
            }
        )

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds common security headers to all responses.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"

        return response


def register_middlewares(app: FastAPI, include_security: bool = True) -> None:
    """
    Register all core middlewares to the FastAPI application.

    Middlewares are registered in reverse order of execution (LIFO).
    The last middleware added is the first one to process the request.
    """
    app.add_middleware(TimingMiddleware)

    if include_security:
        app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(AuthContextMiddleware)

    # Request ID (outermost, so every log line of the request carries it)
    app.add_middleware(RequestIDMiddleware)

    logger.debug("Core middlewares registered", extra={"security_headers": include_security})


__all__ = [
    "RequestIDMiddleware",
    "AuthContextMiddleware",
    "TimingMiddleware",
    "SecurityHeadersMiddleware",
    "register_middlewares",
]
