"""Table filters - decide which schemas and tables are imported."""

from __future__ import annotations

import fnmatch
import re
from typing import Protocol

from pydantic import BaseModel, Field

from dumpcatalog.errors import InvalidConfigError

DEFAULT_FILTER_RULES: list[str] = [
    "*.*",
    "!mysql.*",
    "!sys.*",
    "!INFORMATION_SCHEMA.*",
    "!PERFORMANCE_SCHEMA.*",
    "!METRICS_SCHEMA.*",
    "!INSPECTION_SCHEMA.*",
]


class Filter(Protocol):
    """Decides whether a schema or a table should be kept."""

    def match_schema(self, schema: str) -> bool:
        """Whether any table of the schema could be kept."""
        ...

    def match_table(self, schema: str, table: str) -> bool:
        """Whether the table should be kept."""
        ...


def _split_rule(rule: str) -> tuple[str, str]:
    """Split ``schema.table`` on the first dot outside backquotes."""
    in_quote = False
    for i, ch in enumerate(rule):
        if ch == "`":
            in_quote = not in_quote
        elif ch == "." and not in_quote:
            return rule[:i], rule[i + 1 :]
    raise InvalidConfigError(f"wrong table filter rule '{rule}': missing '.'")


def _compile_wildcard(pattern: str, case_sensitive: bool) -> re.Pattern[str]:
    if len(pattern) >= 2 and pattern.startswith("`") and pattern.endswith("`"):
        regex = re.escape(pattern[1:-1].replace("``", "`")) + r"\Z"
    else:
        regex = fnmatch.translate(pattern)
    return re.compile(regex, 0 if case_sensitive else re.IGNORECASE)


class _FilterRule:
    def __init__(self, text: str, case_sensitive: bool) -> None:
        self.text = text
        self.positive = not text.startswith("!")
        body = text if self.positive else text[1:]
        schema_pattern, table_pattern = _split_rule(body.strip())
        self.match_all_tables = table_pattern == "*"
        try:
            self.schema = _compile_wildcard(schema_pattern, case_sensitive)
            self.table = _compile_wildcard(table_pattern, case_sensitive)
        except re.error as e:
            raise InvalidConfigError(f"wrong table filter rule '{text}': {e}") from e


class TableFilter:
    """
    Wildcard filter rules of the form ``schema.table``.

    ``*``, ``?`` and ``[...]`` are wildcards, a leading ``!`` excludes, and
    a backquoted part is matched literally. Later rules take precedence
    over earlier ones; a name matched by no rule is rejected.
    """

    def __init__(self, rules: list[str], case_sensitive: bool = False) -> None:
        self.case_sensitive = case_sensitive
        self._rules: list[_FilterRule] = []
        for rule in rules:
            rule = rule.strip()
            if not rule or rule.startswith("#"):
                continue
            self._rules.append(_FilterRule(rule, case_sensitive))

    @classmethod
    def default(cls, case_sensitive: bool = False) -> TableFilter:
        return cls(DEFAULT_FILTER_RULES, case_sensitive=case_sensitive)

    def match_schema(self, schema: str) -> bool:
        for rule in reversed(self._rules):
            if not rule.schema.match(schema):
                continue
            if rule.positive:
                return True
            if rule.match_all_tables:
                return False
        return False

    def match_table(self, schema: str, table: str) -> bool:
        for rule in reversed(self._rules):
            if rule.schema.match(schema) and rule.table.match(table):
                return rule.positive
        return False


class TableRef(BaseModel):
    """A table named in a legacy do/ignore list."""

    db_name: str
    tbl_name: str

    model_config = {"frozen": True}


class BlackWhiteList(BaseModel):
    """Legacy replication-style do/ignore lists.

    Names starting with ``~`` are regular expressions, other names match
    exactly.
    """

    do_dbs: list[str] = Field(default_factory=list)
    do_tables: list[TableRef] = Field(default_factory=list)
    ignore_dbs: list[str] = Field(default_factory=list)
    ignore_tables: list[TableRef] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not (self.do_dbs or self.do_tables or self.ignore_dbs or self.ignore_tables)


class _NameMatcher:
    def __init__(self, name: str, case_sensitive: bool) -> None:
        flags = 0 if case_sensitive else re.IGNORECASE
        try:
            if name.startswith("~"):
                self.regex = re.compile(name[1:], flags)
            else:
                self.regex = re.compile(re.escape(name) + r"\Z", flags)
        except re.error as e:
            raise InvalidConfigError(f"invalid black-white-list pattern '{name}': {e}") from e

    def match(self, value: str) -> bool:
        return self.regex.match(value) is not None


class LegacyFilter:
    """Filter built from a BlackWhiteList.

    Schema rules are checked first (``do_dbs`` restricts, ``ignore_dbs``
    excludes); then ``do_tables`` restricts and ``ignore_tables`` excludes.
    """

    def __init__(self, rules: BlackWhiteList, case_sensitive: bool = False) -> None:
        self.rules = rules
        self._do_dbs = [_NameMatcher(n, case_sensitive) for n in rules.do_dbs]
        self._ignore_dbs = [_NameMatcher(n, case_sensitive) for n in rules.ignore_dbs]
        self._do_tables = [
            (_NameMatcher(t.db_name, case_sensitive), _NameMatcher(t.tbl_name, case_sensitive))
            for t in rules.do_tables
        ]
        self._ignore_tables = [
            (_NameMatcher(t.db_name, case_sensitive), _NameMatcher(t.tbl_name, case_sensitive))
            for t in rules.ignore_tables
        ]

    def match_schema(self, schema: str) -> bool:
        if self._do_dbs or self._do_tables:
            listed = any(m.match(schema) for m in self._do_dbs) or any(
                db.match(schema) for db, _ in self._do_tables
            )
            if not listed:
                return False
        return not any(m.match(schema) for m in self._ignore_dbs)

    def match_table(self, schema: str, table: str) -> bool:
        if not self.match_schema(schema):
            return False
        if self._do_tables:
            if any(db.match(schema) and tbl.match(table) for db, tbl in self._do_tables):
                return True
            # a schema listed in do_dbs keeps every table not explicitly ignored
            if not any(m.match(schema) for m in self._do_dbs):
                return False
        return not any(
            db.match(schema) and tbl.match(table) for db, tbl in self._ignore_tables
        )
