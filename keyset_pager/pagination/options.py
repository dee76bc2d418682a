"""Layered paginator configuration.

Each ``PaginatorConfig`` is a partial layer: only the fields that were set
explicitly are applied. Layers are applied in order, so defaults come first,
then a base configuration, then per-call overrides.
"""

from typing import TYPE_CHECKING, List, Optional, Union

from pydantic import BaseModel, Field, InstanceOf, model_validator

from ..config import get_settings
from .order import Order
from .rules import Rule

if TYPE_CHECKING:
    from .paginator import Paginator


class PaginatorConfig(BaseModel):
    """Partial paginator configuration."""

    rules: Optional[List[InstanceOf[Rule]]] = None
    keys: Optional[List[str]] = None
    first: Optional[int] = None
    last: Optional[int] = None
    order: Optional[Union[Order, str]] = Field(default=None, union_mode="left_to_right")
    after: Optional[str] = None
    before: Optional[str] = None
    invert_order: Optional[bool] = None

    def is_set(self, name: str) -> bool:
        return name in self.model_fields_set and getattr(self, name) is not None

    def apply(self, paginator: "Paginator") -> None:
        """Apply the explicitly set fields onto a paginator."""
        if self.is_set("rules"):
            paginator.set_rules(*self.rules)
        elif self.is_set("keys"):
            # keys only apply when the layer carries no rules
            paginator.set_keys(*self.keys)
        if self.is_set("first"):
            paginator.set_first(self.first)
        if self.is_set("last"):
            paginator.set_last(self.last)
        if self.is_set("order"):
            paginator.set_order(self.order)
        if self.is_set("after"):
            paginator.set_after_cursor(self.after)
        if self.is_set("before"):
            paginator.set_before_cursor(self.before)
        if self.is_set("invert_order"):
            paginator.set_invert(self.invert_order)


def default_config() -> PaginatorConfig:
    """Defaults every paginator starts from."""
    settings = get_settings()
    return PaginatorConfig(
        keys=list(settings.default_keys),
        first=settings.default_page_size,
        order=Order(settings.default_order),
    )


def with_rules(*rules: Rule) -> PaginatorConfig:
    return PaginatorConfig(rules=list(rules))


def with_keys(*keys: str) -> PaginatorConfig:
    return PaginatorConfig(keys=list(keys))


def with_first(first: int) -> PaginatorConfig:
    return PaginatorConfig(first=first)


def with_last(last: int) -> PaginatorConfig:
    return PaginatorConfig(last=last)


def with_order(order: Union[Order, str]) -> PaginatorConfig:
    return PaginatorConfig(order=order)


def with_after(cursor: str) -> PaginatorConfig:
    return PaginatorConfig(after=cursor)


def with_before(cursor: str) -> PaginatorConfig:
    return PaginatorConfig(before=cursor)


def with_invert(invert: bool) -> PaginatorConfig:
    return PaginatorConfig(invert_order=invert)


class PaginationParams(BaseModel):
    """Query parameters for cursor pagination."""

    first: Optional[int] = Field(default=None, ge=1, description="Number of items after the cursor")
    last: Optional[int] = Field(default=None, ge=1, description="Number of items before the cursor")
    after: Optional[str] = Field(default=None, description="Cursor to page forward from")
    before: Optional[str] = Field(default=None, description="Cursor to page backward from")
    order: Optional[str] = Field(default=None, pattern="^(asc|desc|ASC|DESC)$", description="Sort order")

    @model_validator(mode="after")
    def check_page_size(self):
        """Reject conflicting or oversized page sizes."""
        if self.first is not None and self.last is not None:
            raise ValueError("first and last are mutually exclusive")
        max_page_size = get_settings().max_page_size
        for name in ("first", "last"):
            value = getattr(self, name)
            if value is not None and value > max_page_size:
                raise ValueError(f"{name} must be at most {max_page_size}")
        return self

    def to_config(self) -> PaginatorConfig:
        """Turn the request parameters into a per-call configuration layer."""
        return PaginatorConfig(**self.model_dump(exclude_none=True))
