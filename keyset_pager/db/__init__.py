"""Collaborators the paginator runs against: schema resolution and query building."""

from .schema import (
    SchemaDescriptor,
    register_schema,
    get_schema,
    clear_schemas,
    to_snake_case
)
from .query import QueryBuilder, AsyncpgQuery, render_placeholders

__all__ = [
    "SchemaDescriptor",
    "register_schema",
    "get_schema",
    "clear_schemas",
    "to_snake_case",
    "QueryBuilder",
    "AsyncpgQuery",
    "render_placeholders"
]
