"""Error handling module for keyset-pager."""

from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    create_problem_response
)
from .pagination import (
    PaginationError,
    ConfigurationError,
    InvalidOrderError,
    InvalidFieldError,
    InvalidCursorError,
    ExecutionError
)
from .handlers import register_exception_handlers

__all__ = [
    "ProblemDetail",
    "ProblemDetailException",
    "create_problem_response",
    "PaginationError",
    "ConfigurationError",
    "InvalidOrderError",
    "InvalidFieldError",
    "InvalidCursorError",
    "ExecutionError",
    "register_exception_handlers"
]
