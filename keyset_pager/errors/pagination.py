"""Typed pagination errors.

Configuration mistakes (no rules, unknown order, unknown field) are programmer
errors and map to 500. A cursor that cannot be decoded is client input and
maps to 400. Failures raised by the query collaborator map to 503.
"""

from typing import Any, Optional

from .problem_details import ProblemDetailException


class PaginationError(ProblemDetailException):
    """Base class for every error raised by the paginator."""


class ConfigurationError(PaginationError):
    """No pagination rule is configured."""

    def __init__(self, detail: str = "no rule configured", **extensions: Any):
        super().__init__(
            status=500,
            title="Pagination Configuration Error",
            detail=detail,
            **extensions
        )


class InvalidOrderError(PaginationError):
    """An unrecognised order value was configured."""

    def __init__(self, order: Any, **extensions: Any):
        self.order = order
        super().__init__(
            status=500,
            title="Invalid Order",
            detail=f"invalid order: {order!r}, must be one of ASC or DESC",
            **extensions
        )


class InvalidFieldError(PaginationError):
    """A pagination key does not name a field of the record type."""

    def __init__(self, key: str, model: Optional[type] = None, reason: str = "not found", **extensions: Any):
        self.key = key
        self.model = model
        model_name = getattr(model, "__name__", None)
        where = f" on {model_name}" if model_name else ""
        super().__init__(
            status=500,
            title="Invalid Field",
            detail=f"invalid field {key!r}{where}: {reason}",
            **extensions
        )


class InvalidCursorError(PaginationError):
    """A cursor string could not be decoded against the configured keys."""

    def __init__(self, detail: str = "invalid cursor", **extensions: Any):
        super().__init__(
            status=400,
            title="Invalid Cursor",
            detail=detail,
            **extensions
        )


class ExecutionError(PaginationError):
    """The query collaborator failed while executing the paginated query."""

    def __init__(self, original: BaseException, **extensions: Any):
        self.original = original
        super().__init__(
            status=503,
            title="Query Execution Failed",
            detail=f"{type(original).__name__}: {original}",
            **extensions
        )
