# storefront/core/error_handlers.py

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

from .exceptions import StorefrontError, AuthenticationError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_CODE_MAP = {
    ErrorCode.ADDRESS_NOT_FOUND: 404,
    ErrorCode.ORDER_NOT_FOUND: 404,
    ErrorCode.PRODUCT_NOT_FOUND: 404,
    ErrorCode.CART_EMPTY: 409,
    ErrorCode.INSUFFICIENT_STOCK: 409,
    ErrorCode.INVALID_QUANTITY: 422,
    ErrorCode.PAYMENT_MODE_UNAVAILABLE: 400,
    ErrorCode.PERSISTENCE_ERROR: 503,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
}


def error_body(code: str, message, **extra) -> dict:
    return {"error": {"code": code, "message": message, **extra}}


def setup_error_handlers(app: FastAPI):
    """Register handlers so every failure leaves the API as ``{"error": {...}}``."""

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        status_code = STATUS_CODE_MAP.get(exc.code, 400)
        logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.code.value}")
        return JSONResponse(status_code=status_code, content=exc.to_response())

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        logger.warning(f"Authentication failed on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=401,
            content=error_body("AUTHENTICATION_FAILED", exc.message),
            headers={"WWW-Authenticate": "Bearer"}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": " -> ".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        logger.warning(f"Rejected {request.method} {request.url.path}: {details}")
        return JSONResponse(
            status_code=422,
            content=error_body("VALIDATION_ERROR", "Request validation failed", details=details)
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # Detail already shaped as an error body
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            return JSONResponse(status_code=exc.status_code, content=exc.detail)

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(f"HTTP_{exc.status_code}", exc.detail),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=error_body(
                ErrorCode.INTERNAL_SERVER_ERROR.value,
                "An internal server error occurred. Please try again later."
            )
        )
