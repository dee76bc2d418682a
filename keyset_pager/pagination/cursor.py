"""Cursor encoding for keyset pagination.

A cursor is the base64url encoding (unpadded) of a JSON array holding one
value per pagination key, in rule order. Decoding validates the array in
strict mode against the record's declared field types, so a cursor either
yields correctly typed comparison arguments or fails loudly.
"""

import base64
import binascii
import re
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ..db.schema import SchemaDescriptor
from ..errors.pagination import InvalidCursorError, InvalidFieldError


_BASE64URL = re.compile(r"^[A-Za-z0-9_-]*={0,2}$")
_values_adapter = TypeAdapter(List[Any])


class Cursor(BaseModel):
    """Pair of opaque cursors bounding a page."""

    after: Optional[str] = Field(default=None, description="Cursor of the last row in the page")
    before: Optional[str] = Field(default=None, description="Cursor of the first row in the page")


def encode_cursor(values: Sequence[Any]) -> str:
    """Encode an ordered sequence of key values.

    Raises:
        ValueError: If a value cannot be serialized
    """
    try:
        raw = _values_adapter.dump_json(list(values))
    except PydanticSerializationError as e:
        raise ValueError(f"Failed to encode cursor: {e}") from e
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def decode_cursor(cursor: str, types: Sequence[Any]) -> Tuple[Any, ...]:
    """Decode a cursor into a tuple typed by ``types``.

    Raises:
        InvalidCursorError: If the cursor is malformed, carries the wrong number
            of values, or a value does not match its type
    """
    return _decode(cursor, TypeAdapter(Tuple[tuple(types)]))


def _decode(cursor: str, adapter: TypeAdapter) -> Tuple[Any, ...]:
    if not cursor:
        raise InvalidCursorError("Empty cursor provided")
    if not isinstance(cursor, str) or not _BASE64URL.match(cursor):
        raise InvalidCursorError("Invalid cursor format: not base64url")

    try:
        raw = base64.urlsafe_b64decode(cursor + "=" * (-len(cursor) % 4))
    except (binascii.Error, ValueError) as e:
        raise InvalidCursorError(f"Invalid cursor format: {e}") from e

    try:
        return adapter.validate_json(raw, strict=True)
    except ValidationError as e:
        messages = []
        for error in e.errors(include_url=False):
            loc = " -> ".join(str(x) for x in error["loc"])
            messages.append(f"{loc}: {error['msg']}" if loc else error["msg"])
        raise InvalidCursorError("Invalid cursor payload: " + "; ".join(messages)) from e


def _read(row: Any, key: str) -> Any:
    if isinstance(row, Mapping):
        if key not in row:
            raise InvalidFieldError(key, type(row), reason="missing from row")
        return row[key]
    try:
        return getattr(row, key)
    except AttributeError as e:
        raise InvalidFieldError(key, type(row), reason="missing from row") from e


class CursorEncoder:
    """Encodes rows into cursors for a fixed list of keys."""

    def __init__(self, keys: Sequence[str]):
        self.keys = list(keys)

    def values(self, row: Any) -> List[Any]:
        return [_read(row, key) for key in self.keys]

    def encode(self, row: Any) -> str:
        """Encode the key values of ``row``.

        Raises:
            InvalidFieldError: If a key is missing from the row or its value
                cannot be serialized
        """
        try:
            return encode_cursor(self.values(row))
        except ValueError as e:
            raise InvalidFieldError(", ".join(self.keys), type(row), reason=str(e)) from e


class CursorDecoder:
    """Decodes cursors for a fixed list of keys on one record type."""

    def __init__(self, keys: Sequence[str], schema: SchemaDescriptor):
        self.keys = list(keys)
        self._adapter = TypeAdapter(Tuple[tuple(schema.type_for(key) for key in self.keys)])

    def decode(self, cursor: str) -> Tuple[Any, ...]:
        return _decode(cursor, self._adapter)
