"""Exception handlers mapping the storefront taxonomy to HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.shared.errors import InternalError, StorefrontError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the full failure server-side and return an opaque body."""
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content=InternalError().to_dict())


def register_error_handlers(app: FastAPI) -> None:
    # ValidationError → 400, ObjectNotFoundError → 404, and the other Protean errors
    register_exception_handlers(app)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
