"""Schema descriptors mapping record fields to SQL columns.

A descriptor is built once per record type and cached. It can come from a
SQLAlchemy declarative model, a pydantic model, or an explicit
``register_schema`` call for anything else.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import sqlalchemy
from pydantic import BaseModel

from ..errors.pagination import ConfigurationError


logger = logging.getLogger(__name__)

_registry: Dict[type, "SchemaDescriptor"] = {}


def to_snake_case(name: str) -> str:
    """Convert ``CreatedAt``/``UserID`` style names to ``created_at``/``user_id``."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.replace("-", "_").lower()


@dataclass
class SchemaDescriptor:
    """Table name plus per-field column names and python types."""

    table: str
    types: Dict[str, Any] = field(default_factory=dict)
    columns: Dict[str, str] = field(default_factory=dict)

    def has_field(self, name: str) -> bool:
        return name in self.types

    def column_for(self, name: str) -> str:
        """Explicit column mapping, or the snake-case form of the field name."""
        return self.columns.get(name) or to_snake_case(name)

    def type_for(self, name: str) -> Any:
        return self.types.get(name, Any)

    @classmethod
    def from_sqlalchemy(cls, model: type) -> "SchemaDescriptor":
        """Build a descriptor from a SQLAlchemy mapped class."""
        mapper = sqlalchemy.inspect(model)
        descriptor = cls(table=mapper.local_table.name)
        for attr in mapper.column_attrs:
            column = attr.columns[0]
            try:
                python_type = column.type.python_type
            except NotImplementedError:
                python_type = Any
            if column.nullable and python_type is not Any:
                python_type = Optional[python_type]
            descriptor.types[attr.key] = python_type
            descriptor.columns[attr.key] = column.name
        return descriptor

    @classmethod
    def from_pydantic(cls, model: type) -> "SchemaDescriptor":
        """Build a descriptor from a pydantic model.

        The table comes from a ``__tablename__`` class attribute when present.
        Columns can be overridden per field with
        ``Field(json_schema_extra={"column": "..."})``.
        """
        table = getattr(model, "__tablename__", None) or to_snake_case(model.__name__)
        descriptor = cls(table=table)
        for name, info in model.model_fields.items():
            descriptor.types[name] = info.annotation
            extra = info.json_schema_extra
            if isinstance(extra, dict) and extra.get("column"):
                descriptor.columns[name] = extra["column"]
        return descriptor


def register_schema(model: type, descriptor: SchemaDescriptor) -> SchemaDescriptor:
    """Register an explicit descriptor for a record type."""
    _registry[model] = descriptor
    logger.debug(f"Registered schema for {model.__name__} on table {descriptor.table}")
    return descriptor


def get_schema(model: type) -> SchemaDescriptor:
    """Return the cached descriptor for a record type, building it on first use.

    Raises:
        ConfigurationError: If no descriptor can be derived for the type
    """
    descriptor = _registry.get(model)
    if descriptor is not None:
        return descriptor

    if not isinstance(model, type):
        raise ConfigurationError(f"cannot resolve schema for {model!r}: not a type")

    if sqlalchemy.inspect(model, raiseerr=False) is not None:
        descriptor = SchemaDescriptor.from_sqlalchemy(model)
    elif issubclass(model, BaseModel):
        descriptor = SchemaDescriptor.from_pydantic(model)
    else:
        raise ConfigurationError(
            f"cannot resolve schema for {model.__name__}: register a SchemaDescriptor first"
        )

    return register_schema(model, descriptor)


def clear_schemas() -> None:
    """Drop every cached descriptor."""
    _registry.clear()
