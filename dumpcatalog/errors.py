"""Exceptions raised while discovering and assembling a dump catalog."""

from __future__ import annotations


class DumpCatalogError(Exception):
    """Base class for every error raised by dumpcatalog."""

    kind = "error"


class DumpCatalogInputError(DumpCatalogError):
    """Problem with the configuration or the source files themselves."""


class DumpCatalogInternalError(DumpCatalogError):
    """Internal bookkeeping contradiction.

    Seeing one of these is a bug in dumpcatalog, not in the user's dump
    or configuration.
    """

    kind = "internal-invariant"


class InvalidConfigError(DumpCatalogInputError):
    """A configured rule could not be parsed."""

    kind = "invalid-config"


class ConfigConflictError(InvalidConfigError):
    """Two mutually exclusive options are set at the same time."""

    kind = "config-conflict"


class FileRouteError(DumpCatalogInputError):
    """A file classification rule produced an unusable result for a path."""

    kind = "file-route"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class TableRouteError(DumpCatalogInputError):
    """A table routing rule failed to apply."""

    kind = "table-route"


class RoutingInvariantError(DumpCatalogInternalError):
    """A database reference count dropped below zero during routing."""

    def __init__(self, schema: str, count: int) -> None:
        super().__init__(
            f"internal error: reference count of database '{schema}' dropped to "
            f"{count} while routing; please report this as a bug"
        )
        self.schema = schema
        self.count = count


class TooManySourceFilesError(DumpCatalogInputError):
    """The scan ceiling was exceeded."""

    kind = "too-many-files"

    def __init__(self, max_scan_files: int) -> None:
        super().__init__(
            f"too many source files: more than {max_scan_files} files were found"
        )
        self.max_scan_files = max_scan_files


class InvalidSchemaFileError(DumpCatalogInputError):
    """Duplicate schema definition or a view without a host table."""

    kind = "invalid-schema-file"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class MissingSchemaFileError(DumpCatalogInputError):
    """Schema text was requested but the schema file is absent."""

    kind = "missing-schema-file"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class StatementExtractionError(DumpCatalogInputError):
    """A schema file could not be turned into SQL text."""

    kind = "statement-extraction"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class StorageError(DumpCatalogError):
    """Listing, existence check, or read failed in the storage layer."""

    kind = "storage"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class LoadCancelledError(DumpCatalogError):
    """The caller cancelled the load."""

    kind = "cancelled"

    def __init__(self, message: str = "catalog load was cancelled") -> None:
        super().__init__(message)
