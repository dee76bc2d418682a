"""Tests for layered paginator configuration."""

import pytest
from pydantic import ValidationError
from unittest.mock import patch

from keyset_pager.config import Settings
from keyset_pager.pagination import (
    Order,
    Paginator,
    PaginatorConfig,
    PaginationParams,
    Rule,
    default_config,
    new_paginator,
    with_after,
    with_before,
    with_first,
    with_invert,
    with_keys,
    with_last,
    with_order,
    with_rules
)


class TestPageSizeExclusivity:
    """Test first and last clear each other."""

    def test_set_last_clears_first(self):
        paginator = Paginator()
        paginator.set_first(10)
        paginator.set_last(5)

        assert paginator.first == 0
        assert paginator.last == 5

    def test_set_first_clears_last(self):
        paginator = Paginator()
        paginator.set_last(5)
        paginator.set_first(10)

        assert paginator.first == 10
        assert paginator.last == 0

    def test_page_size(self):
        paginator = Paginator()
        assert paginator.page_size is None

        paginator.set_last(3)
        assert paginator.page_size == 3


class TestPaginatorConfig:
    """Test applying configuration layers."""

    def test_defaults(self):
        """Test a new paginator starts from the default layer."""
        paginator = new_paginator()

        assert [rule.key for rule in paginator.rules] == ["id"]
        assert paginator.first == 10
        assert paginator.last == 0
        assert paginator.order is Order.DESC
        assert paginator.after is None
        assert paginator.before is None

    def test_defaults_follow_settings(self):
        """Test the default layer reads page size, order and keys from settings."""
        settings = Settings(_env_file=None, default_page_size=3, default_order="asc", default_keys=["created_at", "id"])

        with patch("keyset_pager.pagination.options.get_settings", return_value=settings):
            config = default_config()

        assert config.first == 3
        assert config.order is Order.ASC
        assert config.keys == ["created_at", "id"]

    def test_only_set_fields_override(self):
        """Test later layers only override what they set."""
        paginator = new_paginator(
            PaginatorConfig(keys=["created_at", "id"], first=20, order="ASC"),
            with_after("abc"),
        )

        assert [rule.key for rule in paginator.rules] == ["created_at", "id"]
        assert paginator.first == 20
        assert paginator.order == "ASC"
        assert paginator.after == "abc"

    def test_precedence(self):
        """Test per-call overrides win over the base layer."""
        base = PaginatorConfig(keys=["id"], first=20, order=Order.ASC)
        paginator = new_paginator(base, with_first(5), with_order(Order.DESC))

        assert paginator.first == 5
        assert paginator.order is Order.DESC

    def test_rules_win_over_keys(self):
        """Test keys are ignored when the same layer has rules."""
        rule = Rule("created_at", order=Order.ASC)
        paginator = new_paginator(PaginatorConfig(rules=[rule], keys=["id"]))

        assert paginator.rules == [rule]

    def test_with_rules_and_keys(self):
        paginator = new_paginator(with_rules(Rule("id")), with_keys("name", "id"))

        assert [rule.key for rule in paginator.rules] == ["name", "id"]

    def test_last_clears_default_first(self):
        """Test a last layer clears the default first page size."""
        paginator = new_paginator(with_last(4), with_before("xyz"))

        assert paginator.first == 0
        assert paginator.last == 4
        assert paginator.before == "xyz"

    def test_invert_is_stored(self):
        paginator = new_paginator(with_invert(True))

        assert paginator.invert_order is True

    def test_empty_cursor_means_unset(self):
        paginator = new_paginator(with_after(""))

        assert paginator.after is None

    def test_rules_must_be_rule_instances(self):
        with pytest.raises(ValidationError):
            PaginatorConfig(rules=["id"])


class TestPaginationParams:
    """Test request parameters."""

    def test_to_config(self):
        """Test only provided parameters become config fields."""
        config = PaginationParams(last=5, before="abc", order="asc").to_config()

        assert config.model_fields_set == {"last", "before", "order"}
        paginator = new_paginator(config)
        assert paginator.last == 5
        assert paginator.first == 0
        assert paginator.before == "abc"
        assert paginator.order == "asc"

    def test_first_and_last_exclusive(self):
        with pytest.raises(ValidationError, match="mutually exclusive"):
            PaginationParams(first=5, last=5)

    def test_max_page_size(self):
        with pytest.raises(ValidationError, match="at most 200"):
            PaginationParams(first=201)

    def test_min_page_size(self):
        with pytest.raises(ValidationError):
            PaginationParams(first=0)

    def test_order_pattern(self):
        with pytest.raises(ValidationError):
            PaginationParams(order="sideways")
