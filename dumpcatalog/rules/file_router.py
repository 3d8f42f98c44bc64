"""File router - classifies source paths into schema/table/type by regex rules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import unquote

from pydantic import BaseModel, Field

from dumpcatalog.domain.source import Compression, SourceType
from dumpcatalog.errors import FileRouteError, InvalidConfigError
from dumpcatalog.rules.template import expand_template


class FileRouteRule(BaseModel):
    """
    One classification rule.

    ``schema``, ``table``, ``type``, ``key`` and ``compression`` are
    templates: ``$1``, ``${1}`` or ``$name`` are replaced by the groups
    matched by ``pattern``.

    Example (dumpcatalog.yml):
        files:
          - pattern: '(?i)^(?:[^/]*/)*([a-z0-9_]+)\\.([a-z0-9_]+)\\.csv$'
            schema: $1
            table: $2
            type: csv
    """

    pattern: str
    schema_name: str = Field("", alias="schema")
    table: str = ""
    type: str
    key: str = ""
    compression: str = ""
    unescape: bool = False

    model_config = {"frozen": True, "populate_by_name": True}


@dataclass(frozen=True)
class RouteResult:
    """Classification of a single path."""

    schema: str
    name: str
    type: SourceType
    key: str = ""
    compression: Compression = Compression.NONE


# Built-in rules for mydumper / dumpling output, tried after user rules
DEFAULT_FILE_ROUTE_RULES: list[FileRouteRule] = [
    # *-schema-trigger.sql and *-schema-post.sql are not needed for import
    FileRouteRule(
        pattern=r"(?i).*(-schema-trigger|-schema-post)\.sql(?:\.\w+)?$",
        type="ignore",
    ),
    # {db}-schema-create.sql
    FileRouteRule(
        pattern=r"(?i)^(?:[^/]*/)*([^/.]+)-schema-create\.sql(?:\.(\w+))?$",
        schema="$1",
        type="schema-schema",
        compression="$2",
        unescape=True,
    ),
    # {db}.{table}-schema.sql
    FileRouteRule(
        pattern=r"(?i)^(?:[^/]*/)*([^/.]+)\.(.*?)-schema\.sql(?:\.(\w+))?$",
        schema="$1",
        table="$2",
        type="table-schema",
        compression="$3",
        unescape=True,
    ),
    # {db}.{table}-schema-view.sql
    FileRouteRule(
        pattern=r"(?i)^(?:[^/]*/)*([^/.]+)\.(.*?)-schema-view\.sql(?:\.(\w+))?$",
        schema="$1",
        table="$2",
        type="view-schema",
        compression="$3",
        unescape=True,
    ),
    # {db}.{table}[.{part}].{sql|csv|parquet}[.{compression}]
    FileRouteRule(
        pattern=r"(?i)^(?:[^/]*/)*([^/.]+)\.(.*?)(?:\.([0-9]+))?\.(sql|csv|parquet)(?:\.(\w+))?$",
        schema="$1",
        table="$2",
        type="$4",
        key="$3",
        compression="$5",
        unescape=True,
    ),
]


class _CompiledRule:
    def __init__(self, rule: FileRouteRule) -> None:
        self.rule = rule
        try:
            self.regex = re.compile(rule.pattern)
        except re.error as e:
            raise InvalidConfigError(
                f"invalid file route pattern '{rule.pattern}': {e}"
            ) from e
        self.fixed_type: SourceType | None = None
        if "$" not in rule.type:
            try:
                self.fixed_type = SourceType.parse(rule.type)
            except ValueError:
                raise InvalidConfigError(
                    f"invalid file route type '{rule.type}' in rule '{rule.pattern}'"
                ) from None
        if self.fixed_type != SourceType.IGNORE and not rule.schema_name:
            raise InvalidConfigError(
                f"file route rule '{rule.pattern}' must set a schema"
            )

    def apply(self, match: re.Match[str], path: str) -> RouteResult | None:
        """Build the result for a matched path, None when the rule ignores it."""
        if self.fixed_type == SourceType.IGNORE:
            return None

        rule = self.rule
        try:
            if self.fixed_type is not None:
                source_type = self.fixed_type
            else:
                type_text = expand_template(match, rule.type)
                try:
                    source_type = SourceType.parse(type_text)
                except ValueError:
                    raise FileRouteError(f"unknown source type '{type_text}'") from None
            if source_type == SourceType.IGNORE:
                return None

            compression_text = expand_template(match, rule.compression)
            try:
                compression = Compression.parse(compression_text)
            except ValueError:
                raise FileRouteError(
                    f"unknown compression type '{compression_text}'"
                ) from None

            schema = expand_template(match, rule.schema_name)
            table = expand_template(match, rule.table)
            key = expand_template(match, rule.key)
        except (FileRouteError, ValueError) as e:
            raise FileRouteError(
                f"apply file routing on file '{path}' failed: {e}", path=path
            ) from e

        if rule.unescape:
            schema = unquote(schema)
            table = unquote(table)

        return RouteResult(
            schema=schema,
            name=table,
            type=source_type,
            key=key,
            compression=compression,
        )


class FileRouter:
    """
    Classify dump paths.

    Rules are tried in order and the first matching rule decides. A path
    matched by an ``ignore`` rule, or by no rule at all, is skipped.
    """

    def __init__(self, rules: list[FileRouteRule]) -> None:
        self.rules = list(rules)
        self._compiled = [_CompiledRule(rule) for rule in self.rules]

    @classmethod
    def default(cls) -> FileRouter:
        return cls(DEFAULT_FILE_ROUTE_RULES)

    def route(self, path: str) -> RouteResult | None:
        """Classify a '/'-separated path, returning None if it is not relevant.

        Raises:
            FileRouteError: The matching rule produced an invalid result.
        """
        for compiled in self._compiled:
            match = compiled.regex.search(path)
            if match is not None:
                return compiled.apply(match, path)
        return None
