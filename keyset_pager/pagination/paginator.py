"""Keyset paginator.

The paginator turns its rules and an optional cursor into an ORDER BY clause,
a composite keyset predicate and a LIMIT of one more than the page size. The
extra row only tells whether another page exists and is trimmed before the
outgoing cursors are encoded.
"""

import logging
from collections.abc import MutableSequence
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, Union

from ..db.query import QueryBuilder
from ..db.schema import SchemaDescriptor, get_schema
from ..errors.pagination import ConfigurationError, ExecutionError, PaginationError
from .cursor import Cursor, CursorDecoder, CursorEncoder
from .options import PaginatorConfig, default_config
from .order import Order
from .rules import Rule, null_value, resolve_rules, rules_from_keys, validate_rules


logger = logging.getLogger(__name__)


@dataclass
class PaginationResult:
    """Outcome of one paginate call."""

    cursor: Cursor = field(default_factory=Cursor)
    has_more: bool = False
    rows_affected: int = 0


class Paginator:
    """Builds and runs keyset-paginated queries.

    A paginator is cheap and not safe for concurrent reuse; build one per
    call, or share it only when its configuration does not change.
    """

    def __init__(self):
        self.rules: List[Rule] = []
        self.first: int = 0
        self.last: int = 0
        self.order: Union[Order, str, None] = None
        self.after: Optional[str] = None
        self.before: Optional[str] = None
        # Kept for configuration compatibility, pagination ignores it
        self.invert_order: bool = False

    def set_rules(self, *rules: Rule) -> None:
        self.rules = list(rules)

    def set_keys(self, *keys: str) -> None:
        self.set_rules(*rules_from_keys(keys))

    def set_first(self, first: int) -> None:
        self.first = first
        self.last = 0

    def set_last(self, last: int) -> None:
        self.last = last
        self.first = 0

    def set_order(self, order: Union[Order, str]) -> None:
        self.order = order

    def set_after_cursor(self, cursor: Optional[str]) -> None:
        self.after = cursor or None

    def set_before_cursor(self, cursor: Optional[str]) -> None:
        self.before = cursor or None

    def set_invert(self, invert: bool) -> None:
        self.invert_order = invert

    def apply(self, *configs: PaginatorConfig) -> "Paginator":
        """Apply configuration layers in order."""
        for config in configs:
            config.apply(self)
        return self

    @property
    def page_size(self) -> Optional[int]:
        if self.first > 0:
            return self.first
        if self.last > 0:
            return self.last
        return None

    def is_forward(self) -> bool:
        # an after cursor always wins; last without one reads the tail
        if self.after is not None:
            return True
        return self.before is None and self.last <= 0

    def is_backward(self) -> bool:
        return not self.is_forward()

    async def paginate(self, query: QueryBuilder, dest: List[Any]) -> PaginationResult:
        """Fetch one page of ``query.model`` records into ``dest``.

        Args:
            query: Query builder for the record type, with any base filters
            dest: List the page is written into

        Returns:
            The outgoing cursor pair and whether more rows exist

        Raises:
            ConfigurationError: If no rule is configured or dest is not a list
            InvalidOrderError: If an order value is not recognised
            InvalidFieldError: If a key is not a field of the record type, or a
                returned key value cannot be encoded into a cursor
            InvalidCursorError: If the incoming cursor cannot be decoded
            ExecutionError: If the query fails to execute
        """
        schema, order = self._validate(query.model, dest)
        rules = resolve_rules(self.rules, schema, order)
        forward = self.is_forward()
        fields = self._decode_cursor(rules, schema, forward)

        self._append_paging_query(query, rules, fields, forward)

        # dest is only written once the page and its cursors are complete
        rows: List[Any] = []
        try:
            rows_affected = await query.execute_into(rows)
        except PaginationError:
            raise
        except Exception as e:
            raise ExecutionError(e) from e

        result = PaginationResult(rows_affected=rows_affected)
        if rows:
            page_size = self.page_size
            if page_size is not None and len(rows) > page_size:
                result.has_more = True
                # rows come closest to the cursor first, so the extra row is the last one
                del rows[page_size:]
            if not forward:
                rows.reverse()
            result.cursor = self._encode_cursor(rows, rules)

        dest[:] = rows
        logger.debug(
            f"Paginated {query.model.__name__}: {len(rows)} rows, has_more={result.has_more}"
        )
        return result

    # private

    def _validate(self, model: type, dest: Any) -> Tuple[SchemaDescriptor, Order]:
        if not self.rules:
            raise ConfigurationError()
        order = Order.parse(self.order)
        for rule in self.rules:
            if rule.order is not None:
                Order.parse(rule.order)
        schema = get_schema(model)
        validate_rules(self.rules, schema, model)
        if not isinstance(dest, MutableSequence):
            raise ConfigurationError(f"destination must be a list, got {type(dest).__name__}")
        return schema, order

    def _decode_cursor(self, rules: Sequence[Rule], schema: SchemaDescriptor, forward: bool) -> List[Any]:
        cursor = self.after if forward else self.before
        if cursor is None:
            return []
        decoder = CursorDecoder([rule.key for rule in rules], schema)
        values = decoder.decode(cursor)
        # NULLs compare as the replacement the ORDER BY expression uses
        return [
            null_value(rule, schema) if value is None else value
            for rule, value in zip(rules, values)
        ]

    def _append_paging_query(
        self,
        query: QueryBuilder,
        rules: Sequence[Rule],
        fields: Sequence[Any],
        forward: bool,
    ) -> None:
        page_size = self.page_size
        if page_size is not None:
            query.limit(page_size + 1)

        order_sql = build_order_sql(rules, forward)
        query.order_by(order_sql)
        logger.debug(f"Paging ORDER BY {order_sql}, LIMIT {page_size}")

        if fields:
            cursor_sql = build_cursor_sql(rules, forward)
            query.where(cursor_sql, *build_cursor_args(fields))
            logger.debug(f"Paging WHERE {cursor_sql}")

    def _encode_cursor(self, dest: Sequence[Any], rules: Sequence[Rule]) -> Cursor:
        encoder = CursorEncoder([rule.key for rule in rules])
        return Cursor(after=encoder.encode(dest[-1]), before=encoder.encode(dest[0]))


def build_order_sql(rules: Sequence[Rule], forward: bool = True) -> str:
    """ORDER BY terms for resolved rules, flipped when paging backward."""
    orders = []
    for rule in rules:
        order = rule.order if forward else rule.order.flip()
        orders.append(f"{rule.sql_repr} {order.value}")
    return ", ".join(orders)


def build_cursor_sql(rules: Sequence[Rule], forward: bool = True) -> str:
    """Lexicographic keyset predicate with ``?`` markers.

    For keys a, b, c the predicate is
    ``a > ? OR (a = ? AND b > ?) OR (a = ? AND b = ? AND c > ?)``,
    with each comparison flipped per key order and paging direction.
    """
    queries = []
    prefix = ""
    for rule in rules:
        if (forward and rule.order is Order.ASC) or (not forward and rule.order is Order.DESC):
            operator = ">"
        else:
            operator = "<"
        clause = f"{prefix}{rule.sql_repr} {operator} ?"
        queries.append(f"({clause})" if prefix else clause)
        prefix = f"{prefix}{rule.sql_repr} = ? AND "
    return " OR ".join(queries)


def build_cursor_args(fields: Sequence[Any]) -> List[Any]:
    """Arguments matching ``build_cursor_sql``: each prefix of the cursor values."""
    args: List[Any] = []
    for i in range(1, len(fields) + 1):
        args.extend(fields[:i])
    return args


def new_paginator(*configs: PaginatorConfig) -> Paginator:
    """Build a paginator from the defaults plus the given layers."""
    return Paginator().apply(default_config(), *configs)


async def paginate(query: QueryBuilder, dest: List[Any], *configs: PaginatorConfig) -> PaginationResult:
    """Paginate ``query`` into ``dest`` with a fresh paginator."""
    return await new_paginator(*configs).paginate(query, dest)
