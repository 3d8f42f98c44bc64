"""Source file domain - one physical file found in the dump."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """Kind of a classified source file."""

    SCHEMA_SCHEMA = "schema-schema"  # {db}-schema-create.sql
    TABLE_SCHEMA = "table-schema"  # {db}.{table}-schema.sql
    VIEW_SCHEMA = "view-schema"  # {db}.{table}-schema-view.sql
    SQL = "sql"
    CSV = "csv"
    PARQUET = "parquet"
    IGNORE = "ignore"

    @property
    def is_data(self) -> bool:
        """Whether files of this type carry table rows."""
        return self in (SourceType.SQL, SourceType.CSV, SourceType.PARQUET)

    @classmethod
    def parse(cls, value: str) -> SourceType:
        """Parse a type name as written in file routing rules."""
        normalized = value.strip().lower()
        aliases = {"schema": cls.SCHEMA_SCHEMA, "view": cls.VIEW_SCHEMA}
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class Compression(str, Enum):
    """Compression codec of a source file."""

    NONE = "none"
    GZIP = "gzip"
    LZ4 = "lz4"
    ZSTD = "zstd"
    XZ = "xz"
    SNAPPY = "snappy"
    BZIP2 = "bz2"

    @classmethod
    def parse(cls, value: str) -> Compression:
        """Parse a codec name or file extension, '' meaning uncompressed."""
        normalized = value.strip().lower()
        aliases = {
            "": cls.NONE,
            "gz": cls.GZIP,
            "zst": cls.ZSTD,
            "bzip2": cls.BZIP2,
        }
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class TableName(BaseModel):
    """A (schema, table) pair. ``name`` is empty for database-level files."""

    schema_name: str = Field(alias="schema")
    name: str = ""

    model_config = {"frozen": True, "populate_by_name": True}

    def __str__(self) -> str:
        if not self.name:
            return f"`{self.schema_name}`"
        return f"`{self.schema_name}`.`{self.name}`"


class SourceFileMeta(BaseModel):
    """Immutable descriptor of a physical file."""

    path: str = ""
    type: SourceType = SourceType.SCHEMA_SCHEMA
    compression: Compression = Compression.NONE
    sort_key: str = ""
    file_size: int = 0

    model_config = {"frozen": True}


class FileInfo(BaseModel):
    """A source file together with the table it was classified under.

    The table name is rewritten in place by the routing pass; nothing
    else mutates a FileInfo.
    """

    table_name: TableName
    file_meta: SourceFileMeta = Field(default_factory=SourceFileMeta)

    model_config = {"frozen": False}

    @property
    def schema_name(self) -> str:
        return self.table_name.schema_name

    @property
    def path(self) -> str:
        return self.file_meta.path
