"""Catalog domain - databases, tables and views discovered in a dump."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from dumpcatalog.core.logging import get_logger
from dumpcatalog.domain.source import FileInfo, SourceFileMeta, SourceType, TableName
from dumpcatalog.errors import (
    MissingSchemaFileError,
    StatementExtractionError,
    StorageError,
    TooManySourceFilesError,
)
# sql.statement imports domain.source; bind the module, not its names
from dumpcatalog.sql import statement as sql_statement

if TYPE_CHECKING:
    from dumpcatalog.rules.file_router import FileRouter
    from dumpcatalog.rules.table_filter import Filter
    from dumpcatalog.rules.table_router import TableRouter
    from dumpcatalog.storage import Storage

logger = get_logger(__name__)


def escape_identifier(name: str) -> str:
    """Quote an identifier with backquotes, doubling embedded backquotes."""
    return "`" + name.replace("`", "``") + "`"


class TableMeta(BaseModel):
    """
    A logical table (or view) assembled from one or more physical files.

    Views use the same shape and never carry data files.
    """

    db: str
    name: str
    schema_file: FileInfo
    data_files: list[FileInfo] = Field(default_factory=list)
    character_set: str = "auto"
    total_size: int = 0
    index_ratio: float = 0.0
    is_row_ordered: bool = True

    model_config = {"frozen": False}

    @property
    def has_schema_file(self) -> bool:
        return bool(self.schema_file.file_meta.path)

    def get_schema(
        self, storage: Storage, cancel: threading.Event | None = None
    ) -> str:
        """Return the CREATE TABLE (or CREATE VIEW) text for this table.

        Unlike databases, a table statement cannot be synthesized: a
        missing schema file is an error, and an empty extraction result
        is returned unchanged.

        Raises:
            MissingSchemaFileError: No schema file was found for the table,
                or the recorded file no longer exists in storage.
            StatementExtractionError: The file could not be decoded.
            StorageError: The existence check failed.
        """
        path = self.schema_file.file_meta.path
        if not path:
            raise MissingSchemaFileError(
                f"schema file is missing for the table '{self.db}.{self.name}'"
            )
        try:
            exists = storage.exists(path, cancel=cancel)
        except StorageError as e:
            raise StorageError(
                f"check table schema file exists error: {e}", path=path
            ) from e
        if not exists:
            raise MissingSchemaFileError(
                f"the provided schema file ({path}) for the table "
                f"'{self.db}.{self.name}' doesn't exist",
                path=path,
            )
        try:
            return sql_statement.export_statement(
                storage, self.schema_file, self.character_set, cancel=cancel
            )
        except StatementExtractionError as e:
            logger.error("table_schema_extract_failed", path=path, error=str(e))
            raise


class DatabaseMeta(BaseModel):
    """A logical database and the tables and views that belong to it."""

    name: str
    schema_file: FileInfo
    tables: list[TableMeta] = Field(default_factory=list)
    views: list[TableMeta] = Field(default_factory=list)
    character_set: str = "auto"

    model_config = {"frozen": False}

    @property
    def has_schema_file(self) -> bool:
        return bool(self.schema_file.file_meta.path)

    def default_schema(self) -> str:
        return f"CREATE DATABASE IF NOT EXISTS {escape_identifier(self.name)}"

    def get_schema(
        self, storage: Storage, cancel: threading.Event | None = None
    ) -> str:
        """Return the CREATE DATABASE text for this database.

        Falls back to ``CREATE DATABASE IF NOT EXISTS`` when no schema file
        was found, when extraction fails, or when the file holds nothing
        but whitespace.

        Raises:
            MissingSchemaFileError: A schema file was recorded but is gone.
            StorageError: The existence check failed.
        """
        path = self.schema_file.file_meta.path
        if not path:
            return self.default_schema()
        try:
            exists = storage.exists(path, cancel=cancel)
        except StorageError as e:
            raise StorageError(
                f"check database schema file exists error: {e}", path=path
            ) from e
        if not exists:
            raise MissingSchemaFileError(
                f"the provided schema file ({path}) for the database "
                f"'{self.name}' doesn't exist",
                path=path,
            )
        try:
            schema = sql_statement.export_statement(
                storage, self.schema_file, self.character_set, cancel=cancel
            )
        except StatementExtractionError as e:
            logger.warning("database_schema_extract_failed", path=path, error=str(e))
            return self.default_schema()
        schema = schema.strip()
        if not schema:
            return self.default_schema()
        return schema

    def get_table(self, name: str) -> TableMeta | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None


@dataclass
class Catalog:
    """
    Every database found in a dump, in deterministic import order.

    Also keeps the storage handle and the rules that were used to build it,
    so callers can read schema text back through the same storage.
    """

    databases: list[DatabaseMeta]
    storage: Storage
    character_set: str = "auto"
    table_filter: Filter | None = None
    table_router: TableRouter | None = None
    file_router: FileRouter | None = None

    def get_database(self, name: str) -> DatabaseMeta | None:
        for db in self.databases:
            if db.name == name:
                return db
        return None

    @property
    def database_names(self) -> list[str]:
        return [db.name for db in self.databases]

    @property
    def file_count(self) -> int:
        """Number of physical files referenced by the catalog."""
        count = 0
        for db in self.databases:
            if db.has_schema_file:
                count += 1
            for table in db.tables:
                count += len(table.data_files)
                if table.has_schema_file:
                    count += 1
            count += len(db.views)
        return count

    def to_dict(self) -> dict[str, Any]:
        """Summarize the catalog as plain data (used by ``scan --json``)."""
        return {
            "character_set": self.character_set,
            "databases": [
                {
                    "name": db.name,
                    "schema_file": db.schema_file.path or None,
                    "tables": [
                        {
                            "name": table.name,
                            "schema_file": table.schema_file.path or None,
                            "total_size": table.total_size,
                            "data_files": [
                                {
                                    "path": f.path,
                                    "type": f.file_meta.type.value,
                                    "compression": f.file_meta.compression.value,
                                    "sort_key": f.file_meta.sort_key,
                                    "size": f.file_meta.file_size,
                                }
                                for f in table.data_files
                            ],
                        }
                        for table in db.tables
                    ],
                    "views": [
                        {"name": view.name, "schema_file": view.schema_file.path}
                        for view in db.views
                    ],
                }
                for db in self.databases
            ],
        }


@dataclass
class LoadResult:
    """
    Outcome of a catalog load.

    ``error`` is only ever a TooManySourceFilesError: the catalog then holds
    what was discovered before the ceiling was hit. Every other failure is
    raised instead of being returned.
    """

    catalog: Catalog
    error: TooManySourceFilesError | None = None

    @property
    def partial(self) -> bool:
        return self.error is not None

    def unwrap(self) -> Catalog:
        """Return the catalog, raising the carried error if it is partial."""
        if self.error is not None:
            raise self.error
        return self.catalog


def database_schema_placeholder(schema: str) -> FileInfo:
    """FileInfo used when a database is first referenced by a non-schema file."""
    return FileInfo(
        table_name=TableName(schema=schema),
        file_meta=SourceFileMeta(type=SourceType.SCHEMA_SCHEMA),
    )
