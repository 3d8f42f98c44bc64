"""Tests for DDL extraction in sql/statement.py."""

import bz2
import gzip
import lzma
from collections.abc import Callable

import pytest

from dumpcatalog.domain import Compression, FileInfo, SourceFileMeta, SourceType, TableName
from dumpcatalog.errors import StatementExtractionError, StorageError
from dumpcatalog.sql import decode_character_set, export_statement, inspect_create_table
from dumpcatalog.storage import MemoryStorage

CREATE_TABLE = b"""\
/*!40101 SET NAMES binary*/;
/*!40014 SET FOREIGN_KEY_CHECKS=0*/;

CREATE TABLE `t1` (
  `id` int NOT NULL,
  PRIMARY KEY (`id`)
);
"""


def _schema_file(path: str, compression: Compression = Compression.NONE) -> FileInfo:
    return FileInfo(
        table_name=TableName(schema="db1", name="t1"),
        file_meta=SourceFileMeta(
            path=path, type=SourceType.TABLE_SCHEMA, compression=compression
        ),
    )


class TestExportStatement:
    """Tests for export_statement."""

    def test_comment_statements_are_dropped(self) -> None:
        """Test versioned comments are removed and lines trimmed."""
        storage = MemoryStorage({"t1.sql": CREATE_TABLE})

        text = export_statement(storage, _schema_file("t1.sql"), "auto")

        assert text == "CREATE TABLE `t1` (\n`id` int NOT NULL,\nPRIMARY KEY (`id`)\n);"

    def test_statements_are_concatenated(self) -> None:
        """Test several statements are joined in file order."""
        storage = MemoryStorage({"t1.sql": b"SET x = 1;\n\nCREATE TABLE t1 (id int);\n"})

        text = export_statement(storage, _schema_file("t1.sql"), "auto")

        assert text == "SET x = 1;CREATE TABLE t1 (id int);"

    def test_unterminated_statement_is_dropped(self) -> None:
        """Test trailing text without ';' is not returned."""
        storage = MemoryStorage({"t1.sql": b"CREATE TABLE t1 (id int);\nSELECT 1\n"})

        assert export_statement(storage, _schema_file("t1.sql"), "auto") == (
            "CREATE TABLE t1 (id int);"
        )

    @pytest.mark.parametrize(
        ("compression", "compress"),
        [
            (Compression.GZIP, gzip.compress),
            (Compression.BZIP2, bz2.compress),
            (Compression.XZ, lzma.compress),
        ],
    )
    def test_compressed_schema(
        self, compression: Compression, compress: Callable[[bytes], bytes]
    ) -> None:
        """Test supported codecs are decompressed before folding."""
        storage = MemoryStorage({"t1.sql.c": compress(CREATE_TABLE)})

        text = export_statement(storage, _schema_file("t1.sql.c", compression), "auto")

        assert text.startswith("CREATE TABLE `t1`")

    def test_unsupported_compression(self) -> None:
        """Test codecs without a decoder are rejected."""
        storage = MemoryStorage({"t1.sql.zst": b"\x28\xb5\x2f\xfd"})

        with pytest.raises(StatementExtractionError, match="not supported") as exc_info:
            export_statement(storage, _schema_file("t1.sql.zst", Compression.ZSTD), "auto")

        assert exc_info.value.path == "t1.sql.zst"

    def test_corrupt_gzip(self) -> None:
        """Test a corrupt archive is an extraction error."""
        storage = MemoryStorage({"t1.sql.gz": b"not gzip at all"})

        with pytest.raises(StatementExtractionError, match="decompress"):
            export_statement(storage, _schema_file("t1.sql.gz", Compression.GZIP), "auto")

    def test_gbk_schema(self) -> None:
        """Test a GBK encoded file is decoded with the configured charset."""
        storage = MemoryStorage({"t1.sql": "CREATE TABLE `表` (id int);".encode("gbk")})

        text = export_statement(storage, _schema_file("t1.sql"), "gbk")

        assert text == "CREATE TABLE `表` (id int);"

    def test_invalid_utf8(self) -> None:
        """Test undecodable bytes name the file and the charset."""
        storage = MemoryStorage({"t1.sql": b"CREATE TABLE `\xff` (id int);"})

        with pytest.raises(StatementExtractionError, match="t1.sql as utf8mb4"):
            export_statement(storage, _schema_file("t1.sql"), "utf8mb4")

    def test_missing_file_is_storage_error(self) -> None:
        """Test read failures surface as storage errors."""
        with pytest.raises(StorageError):
            export_statement(MemoryStorage(), _schema_file("gone.sql"), "auto")


class TestDecodeCharacterSet:
    """Tests for decode_character_set."""

    def test_binary_keeps_every_byte(self) -> None:
        """Test binary decoding never fails."""
        assert decode_character_set(b"\xff\x00a", "binary") == "\xff\x00a"

    def test_latin1(self) -> None:
        """Test latin1 follows the Windows-1252 code page."""
        assert decode_character_set(b"caf\xe9 \x80", "latin1") == "café €"

    def test_name_is_case_insensitive(self) -> None:
        """Test charset names ignore case."""
        assert decode_character_set("中".encode(), "UTF8MB4") == "中"

    def test_unknown_charset(self) -> None:
        """Test unknown charset names are rejected."""
        with pytest.raises(StatementExtractionError, match="unsupported character set"):
            decode_character_set(b"", "ebcdic")


class TestInspectCreateTable:
    """Tests for inspect_create_table."""

    def test_mysql_table(self) -> None:
        """Test a typical dumped CREATE TABLE is recognised."""
        check = inspect_create_table(
            "CREATE TABLE `t1` (`id` int NOT NULL, PRIMARY KEY (`id`)) "
            "ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;"
        )

        assert check.ok
        assert check.created == "t1"
        assert check.statements == 1

    def test_table_after_other_statements(self) -> None:
        """Test leading statements are skipped."""
        check = inspect_create_table("SET x = 1;CREATE TABLE t2 (id int);")

        assert check.created == "t2"
        assert check.statements == 2

    def test_no_create_statement(self) -> None:
        """Test text without a CREATE TABLE is reported."""
        check = inspect_create_table("INSERT INTO t1 VALUES (1);")

        assert not check.ok
        assert check.error == "no CREATE TABLE statement found"
