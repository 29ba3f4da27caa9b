"""Map service errors onto the JSON error envelope.

Every error leaves the service as ``{"success": false, "message": ...}``
plus optional structured detail.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from libs.common.errors import StoreError
from libs.common.logging import get_logger

logger = get_logger(__name__)

# Envelope keys that structured error details may not overwrite
RESERVED_KEYS = frozenset({"success", "message", "error"})


def _error_response(status_code: int, message: str, **extra) -> JSONResponse:
    content = {"success": False, "message": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.message)
    details = {k: v for k, v in exc.details.items() if k not in RESERVED_KEYS}
    return _error_response(exc.status_code, exc.message, error=exc.tag, **details)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    missing = any(err["type"] == "missing" for err in exc.errors())
    message = "Missing required fields" if missing else "Invalid request"
    return _error_response(400, message, error="validation", errors=errors)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, "Internal server error", error="internal")


def add_exception_handlers(app: FastAPI) -> None:
    """Register the envelope handlers on an app."""
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
