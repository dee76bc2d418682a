"""Sort order for pagination keys."""

from enum import Enum

from ..errors.pagination import InvalidOrderError


class Order(str, Enum):
    """SQL sort direction."""

    ASC = "ASC"
    DESC = "DESC"

    def flip(self) -> "Order":
        return Order.DESC if self is Order.ASC else Order.ASC

    @classmethod
    def parse(cls, value) -> "Order":
        """Coerce ``"asc"``/``"DESC"``/``Order`` values, case-insensitively.

        Raises:
            InvalidOrderError: If the value is not a recognised order
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.upper())
            except ValueError:
                pass
        raise InvalidOrderError(value)
