"""Query builders the paginator runs its clauses through."""

import logging
import re
from typing import Any, List, Optional, Protocol, Tuple

from pydantic import BaseModel

from ..config import get_settings
from .schema import SchemaDescriptor, get_schema


logger = logging.getLogger(__name__)

# Quoted literals are matched first so a "?" inside them is left alone
_PLACEHOLDER = re.compile(r"'(?:[^']|'')*'|\?")


class QueryBuilder(Protocol):
    """What the paginator needs from a query engine.

    ``where`` receives SQL using ``?`` positional markers. ``execute_into``
    replaces the contents of ``dest`` with the matching records, in the
    order set by ``order_by``, and returns the number of rows fetched.
    """

    model: type

    def where(self, sql: str, *args: Any) -> "QueryBuilder": ...

    def order_by(self, sql: str) -> "QueryBuilder": ...

    def limit(self, count: int) -> "QueryBuilder": ...

    async def execute_into(self, dest: List[Any]) -> int: ...


def render_placeholders(sql: str, start_idx: int = 1) -> Tuple[str, int]:
    """Rewrite ``?`` markers to asyncpg's ``$n`` style.

    Args:
        sql: SQL text using ``?`` markers
        start_idx: Number of the first placeholder

    Returns:
        Tuple of (rendered_sql, next_param_idx)
    """
    idx = start_idx

    def _sub(match: re.Match) -> str:
        nonlocal idx
        token = match.group(0)
        if token != "?":
            return token
        rendered = f"${idx}"
        idx += 1
        return rendered

    return _PLACEHOLDER.sub(_sub, sql), idx


class AsyncpgQuery:
    """Query builder over an asyncpg connection or pool.

    Usage:
        query = AsyncpgQuery(pool, ObjectRow).where("gpt_id = ?", gpt_id)
        result = await paginator.paginate(query, rows)
    """

    def __init__(
        self,
        executor: Any,
        model: type,
        select: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize AsyncpgQuery.

        Args:
            executor: asyncpg Connection or Pool (anything with ``fetch``)
            model: Record type rows are converted into
            select: Base SELECT statement, ``SELECT * FROM <table>`` by default
            timeout: Statement timeout, ``db_command_timeout`` by default
        """
        self.executor = executor
        self.model = model
        self.schema: SchemaDescriptor = get_schema(model)
        self.select = select or f"SELECT * FROM {self.schema.table}"
        self.timeout = timeout if timeout is not None else get_settings().db_command_timeout
        self.conditions: List[Tuple[str, Tuple[Any, ...]]] = []
        self.orders: List[str] = []
        self.limit_count: Optional[int] = None

    def where(self, sql: str, *args: Any) -> "AsyncpgQuery":
        self.conditions.append((sql, args))
        return self

    def order_by(self, sql: str) -> "AsyncpgQuery":
        self.orders.append(sql)
        return self

    def limit(self, count: int) -> "AsyncpgQuery":
        self.limit_count = count
        return self

    def to_sql(self) -> Tuple[str, List[Any]]:
        """Render the statement and its parameters."""
        parts = [self.select]
        params: List[Any] = []
        param_idx = 1

        if self.conditions:
            rendered = []
            for sql, args in self.conditions:
                clause, param_idx = render_placeholders(sql, param_idx)
                rendered.append(f"({clause})")
                params.extend(args)
            parts.append("WHERE " + " AND ".join(rendered))

        if self.orders:
            parts.append("ORDER BY " + ", ".join(self.orders))

        if self.limit_count is not None:
            parts.append(f"LIMIT ${param_idx}")
            params.append(self.limit_count)

        return " ".join(parts), params

    def to_record(self, row: Any) -> Any:
        """Convert a fetched row, keyed by column, into the record type."""
        row = dict(row)
        data = {}
        for name in self.schema.types:
            column = self.schema.column_for(name)
            if column in row:
                data[name] = row[column]
        if isinstance(self.model, type) and issubclass(self.model, BaseModel):
            return self.model.model_validate(data)
        return self.model(**data)

    async def execute_into(self, dest: List[Any]) -> int:
        query, params = self.to_sql()
        logger.debug(f"Executing paginated query: {query}")

        rows = await self.executor.fetch(query, *params, timeout=self.timeout)

        records = [self.to_record(row) for row in rows]
        dest[:] = records
        return len(rows)
