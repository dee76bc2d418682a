"""Pagination module for keyset (cursor-based) pagination."""

from .order import Order
from .rules import Rule, rules_from_keys, validate_rules, resolve_rules, null_value
from .cursor import (
    Cursor,
    CursorEncoder,
    CursorDecoder,
    encode_cursor,
    decode_cursor
)
from .options import (
    PaginatorConfig,
    PaginationParams,
    default_config,
    with_rules,
    with_keys,
    with_first,
    with_last,
    with_order,
    with_after,
    with_before,
    with_invert
)
from .paginator import (
    Paginator,
    PaginationResult,
    build_order_sql,
    build_cursor_sql,
    build_cursor_args,
    new_paginator,
    paginate
)

__all__ = [
    "Order",
    "Rule",
    "rules_from_keys",
    "validate_rules",
    "resolve_rules",
    "null_value",
    "Cursor",
    "CursorEncoder",
    "CursorDecoder",
    "encode_cursor",
    "decode_cursor",
    "PaginatorConfig",
    "PaginationParams",
    "default_config",
    "with_rules",
    "with_keys",
    "with_first",
    "with_last",
    "with_order",
    "with_after",
    "with_before",
    "with_invert",
    "Paginator",
    "PaginationResult",
    "build_order_sql",
    "build_cursor_sql",
    "build_cursor_args",
    "new_paginator",
    "paginate"
]
