"""Tests for table routing in rules/table_router.py."""

import pytest

from dumpcatalog.errors import InvalidConfigError, TableRouteError
from dumpcatalog.rules import RouteRule, TableRouter


class TestTableRouter:
    """Tests for TableRouter.route."""

    def test_schema_rule(self) -> None:
        """Test a schema-only rule renames the database and keeps the table."""
        router = TableRouter([RouteRule(schema_pattern="shard_*", target_schema="shop")])

        assert router.route("shard_01", "orders") == ("shop", "orders")
        assert router.route("shard_01", "") == ("shop", "")
        assert router.route("crm", "orders") == ("crm", "orders")

    def test_table_rule(self) -> None:
        """Test a table rule renames both parts."""
        router = TableRouter(
            [
                RouteRule(
                    schema_pattern="shard_*",
                    table_pattern="orders_*",
                    target_schema="shop",
                    target_table="orders",
                )
            ]
        )

        assert router.route("shard_1", "orders_2") == ("shop", "orders")
        assert router.route("shard_1", "items") == ("shard_1", "items")

    def test_table_rules_do_not_apply_to_databases(self) -> None:
        """Test an empty table name is never matched by a table rule."""
        router = TableRouter(
            [RouteRule(schema_pattern="*", table_pattern="*", target_schema="all")]
        )

        assert router.route("db1", "") == ("db1", "")
        assert router.route("db1", "t") == ("all", "t")

    def test_table_rules_take_precedence(self) -> None:
        """Test table rules win over schema rules listed before them."""
        router = TableRouter(
            [
                RouteRule(schema_pattern="shard_*", target_schema="s"),
                RouteRule(
                    schema_pattern="shard_*",
                    table_pattern="orders*",
                    target_schema="o",
                    target_table="all_orders",
                ),
            ]
        )

        assert router.route("shard_1", "orders_x") == ("o", "all_orders")
        assert router.route("shard_1", "items") == ("s", "items")

    def test_first_match_wins(self) -> None:
        """Test the first matching rule of a kind decides."""
        router = TableRouter(
            [
                RouteRule(schema_pattern="db*", target_schema="first"),
                RouteRule(schema_pattern="db1", target_schema="second"),
            ]
        )

        assert router.route("db1", "t") == ("first", "t")

    def test_captures(self) -> None:
        """Test wildcards capture and can be referenced in targets."""
        router = TableRouter(
            [
                RouteRule(
                    schema_pattern="db_*",
                    table_pattern="t_*",
                    target_schema="merged_$1",
                    target_table="t_$2",
                )
            ]
        )

        assert router.route("db_a", "t_b") == ("merged_a", "t_b")

    def test_question_mark_matches_one_character(self) -> None:
        """Test ? matches exactly one character."""
        router = TableRouter([RouteRule(schema_pattern="db?", target_schema="x")])

        assert router.route("db1", "t") == ("x", "t")
        assert router.route("db12", "t") == ("db12", "t")

    def test_case_insensitive_by_default(self) -> None:
        """Test patterns ignore case unless case_sensitive is set."""
        rules = [RouteRule(schema_pattern="shard_*", target_schema="shop")]

        assert TableRouter(rules).route("SHARD_1", "t") == ("shop", "t")
        assert TableRouter(rules, case_sensitive=True).route("SHARD_1", "t") == ("SHARD_1", "t")

    def test_unknown_capture_reference(self) -> None:
        """Test a target referencing a missing capture fails."""
        router = TableRouter([RouteRule(schema_pattern="db_*", target_schema="$3")])

        with pytest.raises(TableRouteError, match="unknown group"):
            router.route("db_a", "t")

    def test_empty_schema_pattern(self) -> None:
        """Test a rule must name a schema pattern."""
        with pytest.raises(InvalidConfigError):
            TableRouter([RouteRule(schema_pattern="")])
