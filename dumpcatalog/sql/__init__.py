"""SQL text handling for schema files."""

from dumpcatalog.sql.ddl import CreateStatementCheck, inspect_create_table
from dumpcatalog.sql.statement import decode_character_set, export_statement

__all__ = [
    "CreateStatementCheck",
    "decode_character_set",
    "export_statement",
    "inspect_create_table",
]
