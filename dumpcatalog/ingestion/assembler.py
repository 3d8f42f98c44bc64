"""Catalog assembler - folds scanned files into databases, tables and views."""

from __future__ import annotations

from enum import Enum

from dumpcatalog.core.logging import get_logger
from dumpcatalog.domain.catalog import DatabaseMeta, TableMeta, database_schema_placeholder
from dumpcatalog.domain.source import FileInfo, TableName
from dumpcatalog.errors import InvalidSchemaFileError
from dumpcatalog.ingestion.scanner import ScanBuckets

logger = get_logger(__name__)


class DuplicatePolicy(str, Enum):
    """What to do when two schema files define the same database or table."""

    # No routing: a second definition is ambiguous and rejected
    STRICT_UNIQUENESS = "strict"
    # Routing may legitimately map several files onto one name
    ALLOW_MERGE_VIA_ROUTING = "merge"

    @classmethod
    def for_routing(cls, routing_enabled: bool) -> DuplicatePolicy:
        return cls.ALLOW_MERGE_VIA_ROUTING if routing_enabled else cls.STRICT_UNIQUENESS


class CatalogAssembler:
    """
    Build the database tree from routed buckets.

    Databases and tables are created the first time anything refers to
    them. The name indexes only live as long as the assembler.

    With ``partial_scan`` the buckets were cut short by the scan ceiling,
    so a view whose host table was not reached is dropped, not rejected.
    """

    def __init__(
        self, character_set: str, policy: DuplicatePolicy, partial_scan: bool = False
    ) -> None:
        self.character_set = character_set
        self.policy = policy
        self.partial_scan = partial_scan
        self.databases: list[DatabaseMeta] = []
        self._db_index: dict[str, int] = {}
        self._table_index: dict[TableName, int] = {}

    def assemble(self, buckets: ScanBuckets) -> list[DatabaseMeta]:
        """Fold all buckets, in fixed order, into the database list.

        Raises:
            InvalidSchemaFileError: Duplicate schema file under strict policy,
                or a view without a host table in a complete scan.
        """
        strict = self.policy == DuplicatePolicy.STRICT_UNIQUENESS

        for info in buckets.db_schemas:
            _, exists = self.insert_db(info)
            if exists and strict:
                raise InvalidSchemaFileError(
                    f"invalid database schema file, duplicated item - {info.path}",
                    path=info.path,
                )

        for info in buckets.table_schemas:
            _, _, exists = self.insert_table(info)
            if exists and strict:
                raise InvalidSchemaFileError(
                    f"invalid table schema file, duplicated item - {info.path}",
                    path=info.path,
                )

        data_tables = {info.table_name for info in buckets.table_datas}
        for info in buckets.view_schemas:
            _, table_exists = self.insert_view(info, data_tables)
            if not table_exists:
                if self.partial_scan:
                    logger.warning(
                        "view_dropped_past_scan_ceiling",
                        path=info.path,
                        view=info.table_name.name,
                    )
                    continue
                raise InvalidSchemaFileError(
                    "invalid view schema file, miss host table schema for view "
                    f"'{info.table_name.name}' ({info.path})",
                    path=info.path,
                )

        for info in buckets.table_datas:
            # the table may only be known through its data files
            table, _, _ = self.insert_table(FileInfo(table_name=info.table_name))
            table.data_files.append(info)
            table.total_size += info.file_meta.file_size

        return self.databases

    def insert_db(self, info: FileInfo) -> tuple[DatabaseMeta, bool]:
        """Return the database for ``info``, creating it if needed."""
        name = info.schema_name
        index = self._db_index.get(name)
        if index is not None:
            return self.databases[index], True
        self._db_index[name] = len(self.databases)
        db = DatabaseMeta(name=name, schema_file=info, character_set=self.character_set)
        self.databases.append(db)
        return db, False

    def insert_table(self, info: FileInfo) -> tuple[TableMeta, bool, bool]:
        """Return (table, database existed, table existed)."""
        db, db_exists = self.insert_db(database_schema_placeholder(info.schema_name))
        index = self._table_index.get(info.table_name)
        if index is not None:
            return db.tables[index], db_exists, True
        self._table_index[info.table_name] = len(db.tables)
        table = TableMeta(
            db=info.schema_name,
            name=info.table_name.name,
            schema_file=info,
            character_set=self.character_set,
            index_ratio=0.0,
            is_row_ordered=True,
        )
        db.tables.append(table)
        return table, db_exists, False

    def insert_view(
        self, info: FileInfo, data_tables: set[TableName] | frozenset[TableName] = frozenset()
    ) -> tuple[bool, bool]:
        """Register a view if its host table is known; return (db existed, table existed).

        A table counts as known once its schema file was inserted or when it
        appears in ``data_tables``.
        """
        db, db_exists = self.insert_db(database_schema_placeholder(info.schema_name))
        table_exists = info.table_name in self._table_index or info.table_name in data_tables
        if table_exists:
            db.views.append(
                TableMeta(
                    db=info.schema_name,
                    name=info.table_name.name,
                    schema_file=info,
                    character_set=self.character_set,
                )
            )
        return db_exists, table_exists
