"""Request id binding, access logging and error envelopes."""

from stockledger.api.middleware.error_handler import ErrorHandlerMiddleware, setup_exception_handlers
from stockledger.api.middleware.logging import REQUEST_ID_HEADER, LoggingMiddleware

__all__ = [
    "REQUEST_ID_HEADER",
    "ErrorHandlerMiddleware",
    "LoggingMiddleware",
    "setup_exception_handlers",
]
