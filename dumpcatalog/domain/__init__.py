"""Domain layer - source files and the catalog built from them."""

from dumpcatalog.domain.catalog import (
    Catalog,
    DatabaseMeta,
    LoadResult,
    TableMeta,
    database_schema_placeholder,
    escape_identifier,
)
from dumpcatalog.domain.source import (
    Compression,
    FileInfo,
    SourceFileMeta,
    SourceType,
    TableName,
)

__all__ = [
    # Source files
    "Compression",
    "FileInfo",
    "SourceFileMeta",
    "SourceType",
    "TableName",
    # Catalog
    "Catalog",
    "DatabaseMeta",
    "LoadResult",
    "TableMeta",
    "database_schema_placeholder",
    "escape_identifier",
]
