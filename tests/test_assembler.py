"""Tests for catalog assembly and ordering in ingestion/assembler.py and sorter.py."""

import pytest

from dumpcatalog.errors import InvalidSchemaFileError
from dumpcatalog.ingestion import (
    CatalogAssembler,
    DuplicatePolicy,
    ScanBuckets,
    SourceScanner,
    sort_databases,
)
from dumpcatalog.rules import FileRouter, TableFilter
from dumpcatalog.storage import MemoryStorage


def _scan(files: dict[str, bytes]) -> ScanBuckets:
    scanner = SourceScanner(MemoryStorage(files), FileRouter.default(), TableFilter.default())
    return scanner.scan().buckets


def _strict() -> CatalogAssembler:
    return CatalogAssembler("auto", DuplicatePolicy.STRICT_UNIQUENESS)


class TestCatalogAssembler:
    """Tests for CatalogAssembler.assemble."""

    def test_tables_collect_data_files(self, sample_storage: MemoryStorage) -> None:
        """Test data files are attached to their table and sizes summed."""
        buckets = SourceScanner(
            sample_storage, FileRouter.default(), TableFilter.default()
        ).scan().buckets

        databases = _strict().assemble(buckets)

        assert [db.name for db in databases] == ["db1"]
        t1 = databases[0].get_table("t1")
        assert t1 is not None
        assert t1.total_size == 1000
        assert len(t1.data_files) == 2
        assert t1.has_schema_file

    def test_table_known_only_through_data(self) -> None:
        """Test a table without schema file is created from its data files."""
        databases = _strict().assemble(_scan({"db1.t1.1.sql": b"xyz"}))

        db = databases[0]
        assert not db.has_schema_file
        assert db.tables[0].name == "t1"
        assert not db.tables[0].has_schema_file
        assert db.tables[0].total_size == 3

    def test_duplicate_database_schema_strict(self) -> None:
        """Test a second schema file for one database is rejected."""
        buckets = _scan(
            {
                "a/db1-schema-create.sql": b"",
                "b/db1-schema-create.sql": b"",
            }
        )

        with pytest.raises(InvalidSchemaFileError, match="duplicated item") as exc_info:
            _strict().assemble(buckets)

        assert exc_info.value.path == "b/db1-schema-create.sql"
        assert exc_info.value.kind == "invalid-schema-file"

    def test_duplicate_table_schema_strict(self) -> None:
        """Test a second schema file for one table is rejected."""
        buckets = _scan({"a/db1.t1-schema.sql": b"", "b/db1.t1-schema.sql": b""})

        with pytest.raises(InvalidSchemaFileError, match="invalid table schema file"):
            _strict().assemble(buckets)

    def test_duplicates_merge_when_routing(self) -> None:
        """Test duplicates are folded into the first definition under merge policy."""
        buckets = _scan({"a/db1.t1-schema.sql": b"", "b/db1.t1-schema.sql": b""})

        databases = CatalogAssembler("auto", DuplicatePolicy.ALLOW_MERGE_VIA_ROUTING).assemble(
            buckets
        )

        assert len(databases[0].tables) == 1
        assert databases[0].tables[0].schema_file.path == "a/db1.t1-schema.sql"

    def test_view_with_table_schema(self) -> None:
        """Test a view is registered next to its host table."""
        buckets = _scan({"db1.v1-schema.sql": b"", "db1.v1-schema-view.sql": b""})

        databases = _strict().assemble(buckets)

        assert [v.name for v in databases[0].views] == ["v1"]
        assert databases[0].views[0].schema_file.path == "db1.v1-schema-view.sql"

    def test_view_with_data_only_host(self) -> None:
        """Test a host table known from data files is enough for a view."""
        buckets = _scan({"db1.v1-schema-view.sql": b"", "db1.v1.1.sql": b"x"})

        databases = _strict().assemble(buckets)

        assert [v.name for v in databases[0].views] == ["v1"]

    def test_orphan_view(self) -> None:
        """Test a view without any host table is rejected."""
        buckets = _scan({"db1.t1-schema.sql": b"", "db1.v1-schema-view.sql": b""})

        with pytest.raises(InvalidSchemaFileError, match="miss host table schema for view 'v1'"):
            _strict().assemble(buckets)

    def test_orphan_view_dropped_in_partial_scan(self) -> None:
        """Test a view whose host table lies past the ceiling is dropped."""
        buckets = _scan({"db1.t1-schema.sql": b"", "db1.v1-schema-view.sql": b""})
        assembler = CatalogAssembler(
            "auto", DuplicatePolicy.STRICT_UNIQUENESS, partial_scan=True
        )

        databases = assembler.assemble(buckets)

        assert databases[0].views == []
        assert [t.name for t in databases[0].tables] == ["t1"]

    def test_character_set_propagates(self) -> None:
        """Test databases and tables carry the configured character set."""
        databases = CatalogAssembler("gbk", DuplicatePolicy.STRICT_UNIQUENESS).assemble(
            _scan({"db1.t1-schema.sql": b""})
        )

        assert databases[0].character_set == "gbk"
        assert databases[0].tables[0].character_set == "gbk"


class TestSortDatabases:
    """Tests for sort_databases."""

    def test_tables_by_size_then_files_by_key(self) -> None:
        """Test smaller tables first and chunks ordered by sort key."""
        databases = _strict().assemble(
            _scan(
                {
                    "db1.big.2.sql": b"x" * 50,
                    "db1.big.1.sql": b"x" * 50,
                    "db1.small.1.sql": b"x" * 10,
                }
            )
        )

        sort_databases(databases)

        tables = databases[0].tables
        assert [t.name for t in tables] == ["small", "big"]
        assert [f.file_meta.sort_key for f in tables[1].data_files] == ["1", "2"]

    def test_sort_is_stable(self) -> None:
        """Test equally sized tables keep their discovery order."""
        databases = _strict().assemble(
            _scan(
                {
                    "db1.c.1.sql": b"x",
                    "db1.a.1.sql": b"x",
                    "db1.b.1.sql": b"x",
                    "db1.a-schema.sql": b"",
                    "db1.c-schema.sql": b"",
                }
            )
        )

        sort_databases(databases)

        # schema files are inserted first, in walk order
        assert [t.name for t in databases[0].tables] == ["a", "c", "b"]

    def test_databases_keep_discovery_order(self) -> None:
        """Test databases are not reordered by size."""
        databases = _strict().assemble(
            _scan({"zeta.t.1.sql": b"x", "alpha.t.1.sql": b"x" * 100})
        )

        sort_databases(databases)

        assert [db.name for db in databases] == ["alpha", "zeta"]
