"""Inspect extracted DDL with sqlglot."""

from __future__ import annotations

from dataclasses import dataclass

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError, SqlglotError

# Dumps are produced by MySQL-compatible servers
DDL_DIALECT = "mysql"


@dataclass(frozen=True)
class CreateStatementCheck:
    """What a schema file's text turned out to create."""

    statements: int
    created: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def inspect_create_table(text: str) -> CreateStatementCheck:
    """Parse schema text and find the table its CREATE TABLE statement names.

    Parse failures are reported in the result, not raised.
    """
    try:
        statements = [s for s in sqlglot.parse(text, read=DDL_DIALECT) if s is not None]
    except ParseError as e:
        message = e.errors[0]["description"] if e.errors else str(e)
        return CreateStatementCheck(statements=0, error=message)
    except SqlglotError as e:
        return CreateStatementCheck(statements=0, error=str(e) or type(e).__name__)

    for statement in statements:
        if isinstance(statement, exp.Create) and statement.kind == "TABLE":
            table = statement.this.find(exp.Table)
            return CreateStatementCheck(
                statements=len(statements),
                created=table.name if table is not None else None,
            )
    return CreateStatementCheck(
        statements=len(statements), error="no CREATE TABLE statement found"
    )
