"""Pagination rules: one rule per ordered key."""

from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from ..db.schema import SchemaDescriptor
from ..errors.pagination import ConfigurationError, InvalidFieldError
from .order import Order


@dataclass
class Rule:
    """One pagination key.

    Attributes:
        key: Field name on the record type
        order: Per-key direction, filled from the paginator order when None
        sql_repr: SQL expression for the key, derived from the schema when None
        null_replacement: Value NULLs sort as, via COALESCE
    """

    key: str
    order: Optional[Order] = None
    sql_repr: Optional[str] = None
    null_replacement: Any = None

    @classmethod
    def from_key(cls, key: str) -> "Rule":
        return cls(key=key)


def rules_from_keys(keys: Iterable[str]) -> List[Rule]:
    return [Rule.from_key(key) for key in keys]


def sql_literal(value: Any) -> str:
    """Render a NULL replacement as a quoted SQL literal."""
    return "'" + str(value).replace("'", "''") + "'"


def validate_rules(rules: Sequence[Rule], schema: SchemaDescriptor, model: Optional[type] = None) -> None:
    """Check that rules exist, are unique and name fields of the record type.

    Raises:
        ConfigurationError: If no rule is configured
        InvalidFieldError: If a key is unknown or repeated
    """
    if not rules:
        raise ConfigurationError()

    seen = set()
    for rule in rules:
        if not schema.has_field(rule.key):
            raise InvalidFieldError(rule.key, model)
        if rule.key in seen:
            raise InvalidFieldError(rule.key, model, reason="duplicated")
        seen.add(rule.key)
        null_value(rule, schema, model)


def null_value(rule: Rule, schema: SchemaDescriptor, model: Optional[type] = None) -> Any:
    """The NULL replacement coerced to the field's type, e.g. a date string to a date.

    Raises:
        InvalidFieldError: If the replacement does not fit the field type
    """
    if rule.null_replacement is None:
        return None
    try:
        return TypeAdapter(schema.type_for(rule.key)).validate_python(rule.null_replacement)
    except ValidationError as e:
        raise InvalidFieldError(
            rule.key, model, reason=f"null replacement {rule.null_replacement!r} does not match field type"
        ) from e


def resolve_rules(rules: Sequence[Rule], schema: SchemaDescriptor, default_order: Order) -> List[Rule]:
    """Return copies of the rules with SQL expression and order filled in.

    The configured rules are left untouched so that resolving again yields the
    same expressions.
    """
    resolved = []
    for rule in rules:
        sql_repr = rule.sql_repr
        if not sql_repr:
            sql_repr = f"{schema.table}.{schema.column_for(rule.key)}"
        if rule.null_replacement is not None:
            sql_repr = f"COALESCE({sql_repr}, {sql_literal(rule.null_replacement)})"
        order = Order.parse(rule.order) if rule.order is not None else default_order
        resolved.append(replace(rule, sql_repr=sql_repr, order=order))
    return resolved
