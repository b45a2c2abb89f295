from .error_handler import ErrorHandlerMiddleware
from .logging_middleware import LoggingMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "LoggingMiddleware",
]
