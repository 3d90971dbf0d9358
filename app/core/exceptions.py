from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.core.logging import get_logger

logger = get_logger("core.exceptions")


class SongStoreError(Exception):
    """Base error raised by the song record store"""


class SongValidationError(SongStoreError):
    """A document failed field validation; ``errors`` lists every violation"""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class InvalidSongIdError(SongStoreError):
    """Identifier is not a 24-character hexadecimal string"""

    def __init__(self, song_id: object):
        super().__init__(f"Invalid song id: {song_id!r}")
        self.song_id = song_id


class StoreConnectionError(SongStoreError):
    """The store could not be reached at startup"""


class PayloadTooLargeError(Exception):
    """Request body grew past the configured ceiling while being read"""

    def __init__(self, limit: int):
        super().__init__(f"Request body exceeds {limit} bytes")
        self.limit = limit


def payload_too_large_response(limit: int) -> JSONResponse:
    return error_response(
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        "Payload too large",
        message=f"Request body cannot exceed {limit} bytes",
    )


def error_response(
    status_code: int,
    error: str,
    message: str | None = None,
    details: list[str] | None = None,
) -> JSONResponse:
    """Build a JSON error body shaped as {error, message?, details?}"""
    content: dict = {"error": error}
    if message is not None:
        content["message"] = message
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error.get('msg')}" if location else str(error.get("msg"))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [_format_validation_error(e) for e in exc.errors()]
    logger.warning(f"Rejected request to {request.url.path}: {details}")
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        message="The request contains invalid parameters",
        details=details,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unmatched paths and unmatched methods both count as unknown routes
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return error_response(
            status.HTTP_404_NOT_FOUND,
            "Route not found",
            message="The requested endpoint does not exist",
        )
    return error_response(exc.status_code, str(exc.detail))


async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError) -> JSONResponse:
    logger.warning(f"Refused body over {exc.limit} bytes on {request.url.path}")
    return payload_too_large_response(exc.limit)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Generic 500; raw error text only in development"""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    settings = get_settings()
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        message=str(exc) if settings.is_development else "Something went wrong",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(PayloadTooLargeError, payload_too_large_handler)
