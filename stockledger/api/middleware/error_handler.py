"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stockledger.application.dto.responses import ErrorResponse
from stockledger.config import get_logger
from stockledger.core.exceptions import (
    BusyError,
    DuplicateKeyError,
    InsufficientStockError,
    LedgerError,
    NotFoundError,
    QuantityLimitError,
    ReferencedRowError,
    StaleReferenceError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first match wins, so subclasses go first
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    QuantityLimitError: status.HTTP_400_BAD_REQUEST,
    DuplicateKeyError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ReferencedRowError: status.HTTP_409_CONFLICT,
    BusyError: status.HTTP_409_CONFLICT,
    StaleReferenceError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "INVALID_MOVEMENT": "warehouse_to_id is required for TRANSFER, must differ from warehouse_id, "
    "and is not allowed for IN, OUT or ADJUST.",
    "INSUFFICIENT_STOCK": "Check GET /inventory/{warehouseId}/{productId} for the available quantity.",
    "QUANTITY_LIMIT": "Split the stock across warehouses or record an OUT first.",
    "DUPLICATE_KEY": "Another live row already uses this code or SKU.",
    "WAREHOUSE_NOT_FOUND": "Check the warehouse ID and try GET /warehouses to list warehouses.",
    "PRODUCT_NOT_FOUND": "Check the product ID and try GET /products to list products.",
    "ROW_REFERENCED": "The row has stock history. Use a soft delete instead.",
    "BUSY": "The store is busy. Retry the same request unchanged.",
    "STALE_REFERENCE": "A warehouse or product was removed concurrently. Check it still exists.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    405: "The method is not allowed for this resource.",
    409: "The request conflicts with the current state. Retry later.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions to standardized JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(
        self,
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Convert exception to standardized JSON response."""
        status_code = _status_for(exc)
        error_code = exc.code if isinstance(exc, LedgerError) else exc.__class__.__name__
        request_id = getattr(request.state, "request_id", None)

        if status_code >= 500:
            logger.error(
                "unhandled_exception",
                request_id=request_id,
                path=request.url.path,
                error_type=error_code,
                error=str(exc),
                traceback=traceback.format_exc(),
            )
            # Storage internals stay in the log
            message = "Internal server error"
        else:
            logger.warning(
                "request_rejected",
                request_id=request_id,
                path=request.url.path,
                error_type=error_code,
                error=str(exc),
            )
            message = str(exc)

        error_response = ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_get_hint(error_code, status_code),
            path=request.url.path,
        )

        headers = {"Retry-After": "1"} if isinstance(exc, BusyError) else None
        return JSONResponse(
            status_code=status_code,
            content=error_response.model_dump(mode="json"),
            headers=headers,
        )


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Render request validation failures as 400 with the standard envelope."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint=HINT_MAP["VALIDATION_ERROR"],
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int) -> str:
    """Infer a machine-readable error code from an HTTP status."""
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 400:
        return "BAD_REQUEST"
    if status_code == 405:
        return "METHOD_NOT_ALLOWED"
    return "HTTP_ERROR"
