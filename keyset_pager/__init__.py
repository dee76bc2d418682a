"""Keyset (cursor-based) pagination over SQL query builders."""

from .pagination import (
    Order,
    Rule,
    Cursor,
    Paginator,
    PaginationResult,
    PaginatorConfig,
    PaginationParams,
    new_paginator,
    paginate,
    with_rules,
    with_keys,
    with_first,
    with_last,
    with_order,
    with_after,
    with_before,
    with_invert
)
from .db import SchemaDescriptor, register_schema, AsyncpgQuery
from .errors import (
    PaginationError,
    ConfigurationError,
    InvalidOrderError,
    InvalidFieldError,
    InvalidCursorError,
    ExecutionError
)

__version__ = "1.0.0"

__all__ = [
    "Order",
    "Rule",
    "Cursor",
    "Paginator",
    "PaginationResult",
    "PaginatorConfig",
    "PaginationParams",
    "new_paginator",
    "paginate",
    "with_rules",
    "with_keys",
    "with_first",
    "with_last",
    "with_order",
    "with_after",
    "with_before",
    "with_invert",
    "SchemaDescriptor",
    "register_schema",
    "AsyncpgQuery",
    "PaginationError",
    "ConfigurationError",
    "InvalidOrderError",
    "InvalidFieldError",
    "InvalidCursorError",
    "ExecutionError"
]
