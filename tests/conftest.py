"""Pytest configuration and shared fixtures for the keyset-pager tests."""

import logging
import sqlite3
from datetime import date, datetime
from typing import Any, ClassVar, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import BaseModel, Field

from keyset_pager.db.schema import clear_schemas, get_schema


# Disable logging for cleaner test output
logging.getLogger("asyncio").setLevel(logging.WARNING)
logging.getLogger("asyncpg").setLevel(logging.WARNING)


class Item(BaseModel):
    """Record type used across the paginator tests."""

    __tablename__: ClassVar[str] = "items"

    id: int
    name: str
    created_at: datetime
    due_date: Optional[date] = None


class Article(BaseModel):
    """Record type with an explicit column mapping."""

    __tablename__: ClassVar[str] = "articles"

    id: int
    title: str
    PublishedAt: datetime = Field(json_schema_extra={"column": "published"})


def _sql_param(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class SQLiteQuery:
    """Query builder running against an in-memory SQLite database."""

    def __init__(self, conn: sqlite3.Connection, model: type):
        self.conn = conn
        self.model = model
        self.schema = get_schema(model)
        self.conditions: List[tuple] = []
        self.orders: List[str] = []
        self.limit_count: Optional[int] = None
        self.executions = 0

    def where(self, sql: str, *args: Any) -> "SQLiteQuery":
        self.conditions.append((sql, args))
        return self

    def order_by(self, sql: str) -> "SQLiteQuery":
        self.orders.append(sql)
        return self

    def limit(self, count: int) -> "SQLiteQuery":
        self.limit_count = count
        return self

    def to_sql(self):
        sql = f"SELECT * FROM {self.schema.table}"
        params: List[Any] = []
        if self.conditions:
            sql += " WHERE " + " AND ".join(f"({clause})" for clause, _ in self.conditions)
            for _, args in self.conditions:
                params.extend(_sql_param(arg) for arg in args)
        if self.orders:
            sql += " ORDER BY " + ", ".join(self.orders)
        if self.limit_count is not None:
            sql += " LIMIT ?"
            params.append(self.limit_count)
        return sql, params

    async def execute_into(self, dest: List[Any]) -> int:
        self.executions += 1
        sql, params = self.to_sql()
        rows = self.conn.execute(sql, params).fetchall()
        dest[:] = [self.model.model_validate(dict(row)) for row in rows]
        return len(rows)


@pytest.fixture(autouse=True)
def reset_schemas():
    """Start every test with an empty schema cache."""
    clear_schemas()
    yield
    clear_schemas()


@pytest.fixture
def db():
    """In-memory SQLite database with an items table."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute(
        "CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT NOT NULL, "
        "created_at TEXT NOT NULL, due_date TEXT)"
    )
    yield conn
    conn.close()


@pytest.fixture
def insert_items(db):
    """Insert Item rows into the items table."""

    def _insert(*items: Item) -> None:
        for item in items:
            db.execute(
                "INSERT INTO items (id, name, created_at, due_date) VALUES (?, ?, ?, ?)",
                (
                    item.id,
                    item.name,
                    item.created_at.isoformat(),
                    item.due_date.isoformat() if item.due_date else None,
                ),
            )
        db.commit()

    return _insert


@pytest.fixture
def five_items(insert_items) -> List[Item]:
    """Rows with ids 1..5 created one day apart."""
    items = [
        Item(id=i, name=f"item-{i}", created_at=datetime(2024, 1, i, 12, 0, 0))
        for i in range(1, 6)
    ]
    insert_items(*items)
    return items


@pytest.fixture
def make_query(db):
    """Factory for SQLite-backed query builders."""

    def _make(model: type = Item) -> SQLiteQuery:
        return SQLiteQuery(db, model)

    return _make


@pytest.fixture
def mock_query():
    """Query builder double recording the clauses it receives."""
    query = MagicMock()
    query.model = Item
    query.execute_into = AsyncMock(return_value=0)
    return query
