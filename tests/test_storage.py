"""Tests for storage backends in storage/."""

import os
import threading
from pathlib import Path

import pytest

from dumpcatalog.errors import LoadCancelledError, StorageError
from dumpcatalog.storage import LocalStorage, MemoryStorage, Storage


def _listing(storage: Storage) -> list[tuple[str, int]]:
    seen: list[tuple[str, int]] = []
    storage.walk(lambda path, size: seen.append((path, size)))
    return seen


class TestLocalStorage:
    """Tests for LocalStorage."""

    def test_walk_order(self, tmp_path: Path) -> None:
        """Test entries are visited sorted per directory, recursing in place."""
        (tmp_path / "b.sql").write_bytes(b"12")
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "z.sql").write_bytes(b"1")
        (tmp_path / "c.sql").write_bytes(b"")

        assert _listing(LocalStorage(tmp_path)) == [("a/z.sql", 1), ("b.sql", 2), ("c.sql", 0)]

    def test_read_and_exists(self, tmp_path: Path) -> None:
        """Test reading files relative to the root."""
        (tmp_path / "x.sql").write_bytes(b"SELECT 1;")
        storage = LocalStorage(tmp_path)

        assert storage.exists("x.sql")
        assert not storage.exists("y.sql")
        assert storage.read_all("x.sql") == b"SELECT 1;"

    def test_read_missing_file(self, tmp_path: Path) -> None:
        """Test read errors are wrapped with the path."""
        with pytest.raises(StorageError) as exc_info:
            LocalStorage(tmp_path).read_all("nope.sql")

        assert exc_info.value.path == "nope.sql"
        assert exc_info.value.kind == "storage"

    def test_missing_root(self, tmp_path: Path) -> None:
        """Test walking a root that does not exist."""
        with pytest.raises(StorageError):
            _listing(LocalStorage(tmp_path / "missing"))

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_dangling_symlink_is_skipped(self, tmp_path: Path) -> None:
        """Test entries that are neither files nor directories are skipped."""
        (tmp_path / "link.sql").symlink_to(tmp_path / "gone.sql")
        (tmp_path / "real.sql").write_bytes(b"x")

        assert _listing(LocalStorage(tmp_path)) == [("real.sql", 1)]

    def test_cancel(self, tmp_path: Path) -> None:
        """Test a set cancel event stops the walk."""
        (tmp_path / "x.sql").write_bytes(b"")
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(LoadCancelledError):
            LocalStorage(tmp_path).walk(lambda path, size: None, cancel=cancel)

    def test_is_storage(self, tmp_path: Path) -> None:
        """Test LocalStorage satisfies the Storage protocol."""
        assert isinstance(LocalStorage(tmp_path), Storage)


class TestMemoryStorage:
    """Tests for MemoryStorage."""

    def test_walk_sorted(self) -> None:
        """Test keys are visited in sorted order."""
        storage = MemoryStorage({"b": b"22", "a/c": b"1"})
        storage.put("a", "text")

        assert _listing(storage) == [("a", 4), ("a/c", 1), ("b", 2)]

    def test_describe(self) -> None:
        """Test the storage location is reported as a URL."""
        assert MemoryStorage(name="dump").describe() == "memory://dump"

    def test_read_missing(self) -> None:
        """Test missing objects raise StorageError."""
        with pytest.raises(StorageError, match="object not found"):
            MemoryStorage().read_all("x")

    def test_is_storage(self) -> None:
        """Test MemoryStorage satisfies the Storage protocol."""
        assert isinstance(MemoryStorage(), Storage)
