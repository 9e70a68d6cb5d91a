"""Middleware components.

This package provides error handling for the composer gateway.
"""

from composer.middleware.error_handler_middleware import (
    ErrorHandlerMiddleware,
    http_exception_handler,
)

__all__ = [
    "ErrorHandlerMiddleware",
    "http_exception_handler",
]
