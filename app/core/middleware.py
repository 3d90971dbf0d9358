from fastapi import FastAPI, Request
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.config import Settings
from app.core.exceptions import (
    PayloadTooLargeError,
    payload_too_large_response,
    unhandled_exception_handler,
)
from app.core.logging import get_logger

logger = get_logger("core.middleware")

SECURITY_HEADERS = {
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class BodySizeLimitMiddleware:
    """
    Enforce a request body ceiling.

    A declared Content-Length over the limit is refused up front. Bodies
    without one (chunked uploads) are counted as they are received, and
    ``PayloadTooLargeError`` is raised into whatever is reading the body as
    soon as the count passes the limit; the exception handler turns it into
    a 413.
    """

    def __init__(self, app: ASGIApp, max_body_size: int):
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_size:
            logger.warning(f"Refused {content_length} byte body on {scope['path']}")
            response = payload_too_large_response(self.max_body_size)
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    raise PayloadTooLargeError(self.max_body_size)
            return message

        await self.app(scope, limited_receive, send)


def register_middleware(app: FastAPI, settings: Settings) -> None:
    """
    Attach the body ceiling, catch-all error and security header middleware.

    Later registrations wrap earlier ones, so the order here is innermost
    first: anything the catch-all produces still gets security headers,
    and CORS (added in main) wraps all of them.
    """
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            return await unhandled_exception_handler(request, e)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response
