"""Table router - renames (schema, table) pairs by wildcard rules."""

from __future__ import annotations

import re

from pydantic import BaseModel

from dumpcatalog.errors import InvalidConfigError, TableRouteError
from dumpcatalog.rules.template import expand_template


class RouteRule(BaseModel):
    """
    One routing rule.

    Each ``*`` or ``?`` in a pattern captures what it matched, numbered
    left to right across the schema pattern and then the table pattern.
    Targets may reference the captures as ``$1``, ``$2``...

    Example (dumpcatalog.yml):
        routes:
          - schema_pattern: "shard_*"
            table_pattern: "orders_*"
            target_schema: shards
            target_table: orders
    """

    schema_pattern: str
    table_pattern: str = ""
    target_schema: str = ""
    target_table: str = ""

    model_config = {"frozen": True}


def _wildcard_to_regex(pattern: str) -> str:
    parts: list[str] = []
    for ch in pattern:
        if ch == "*":
            parts.append("(.*)")
        elif ch == "?":
            parts.append("(.)")
        else:
            parts.append(re.escape(ch))
    return "".join(parts)


class _CompiledRoute:
    def __init__(self, rule: RouteRule, case_sensitive: bool) -> None:
        if not rule.schema_pattern:
            raise InvalidConfigError("table route rule must set schema_pattern")
        self.rule = rule
        flags = re.DOTALL | (0 if case_sensitive else re.IGNORECASE)
        # table rules match "schema\x00table" as one string
        source = _wildcard_to_regex(rule.schema_pattern)
        if rule.table_pattern:
            source += "\x00" + _wildcard_to_regex(rule.table_pattern)
        try:
            self.regex = re.compile(source + r"\Z", flags)
        except re.error as e:
            raise InvalidConfigError(f"invalid table route rule {rule.model_dump()}: {e}") from e

    @property
    def is_table_rule(self) -> bool:
        return bool(self.rule.table_pattern)

    def match(self, schema: str, table: str) -> re.Match[str] | None:
        if self.is_table_rule:
            if not table:
                return None
            return self.regex.match(f"{schema}\x00{table}")
        return self.regex.match(schema)


class TableRouter:
    """
    Route table names according to an ordered rule list.

    Rules with a table pattern only apply to tables and are preferred
    over schema-only rules. Among rules of the same kind the first match
    wins. An empty target keeps the original name.
    """

    def __init__(self, rules: list[RouteRule], case_sensitive: bool = False) -> None:
        self.rules = list(rules)
        compiled = [_CompiledRoute(rule, case_sensitive) for rule in self.rules]
        self._table_rules = [c for c in compiled if c.is_table_rule]
        self._schema_rules = [c for c in compiled if not c.is_table_rule]

    def route(self, schema: str, table: str) -> tuple[str, str]:
        """Return the routed (schema, table).

        Raises:
            TableRouteError: A target references a capture that does not exist.
        """
        for rules in (self._table_rules, self._schema_rules):
            for compiled in rules:
                match = compiled.match(schema, table)
                if match is None:
                    continue
                rule = compiled.rule
                try:
                    target_schema = (
                        expand_template(match, rule.target_schema)
                        if rule.target_schema
                        else schema
                    )
                    target_table = (
                        expand_template(match, rule.target_table)
                        if rule.target_table and compiled.is_table_rule
                        else table
                    )
                except ValueError as e:
                    raise TableRouteError(
                        f"failed to route table `{schema}`.`{table}`: {e}"
                    ) from e
                return target_schema, target_table
        return schema, table
