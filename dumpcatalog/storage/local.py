"""Local filesystem storage."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from dumpcatalog.errors import StorageError
from dumpcatalog.storage.base import WalkVisitor, check_cancelled


class LocalStorage:
    """Storage backed by a directory on the local filesystem."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def describe(self) -> str:
        return str(self.root)

    def walk(self, visit: WalkVisitor, cancel: threading.Event | None = None) -> None:
        """Visit every regular file under the root.

        Each directory's entries are sorted by name and directories are
        descended into at the position they sort at, so the order is the
        same on every run for an unchanged tree.
        """
        if not self.root.is_dir():
            raise StorageError(f"source directory not found: {self.root}", path=str(self.root))
        self._walk_dir(self.root, "", visit, cancel)

    def _walk_dir(
        self,
        directory: Path,
        prefix: str,
        visit: WalkVisitor,
        cancel: threading.Event | None,
    ) -> None:
        check_cancelled(cancel)
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as e:
            raise StorageError(f"failed to list directory '{directory}': {e}", path=prefix) from e

        for entry in entries:
            rel_path = f"{prefix}{entry.name}"
            try:
                if entry.is_dir():
                    self._walk_dir(Path(entry.path), f"{rel_path}/", visit, cancel)
                    continue
                if not entry.is_file():
                    continue
                size = entry.stat().st_size
            except OSError as e:
                raise StorageError(f"failed to stat '{rel_path}': {e}", path=rel_path) from e
            check_cancelled(cancel)
            visit(rel_path, size)

    def exists(self, path: str, cancel: threading.Event | None = None) -> bool:
        check_cancelled(cancel)
        try:
            return (self.root / path).is_file()
        except OSError as e:
            raise StorageError(f"failed to check '{path}': {e}", path=path) from e

    def read_all(self, path: str, cancel: threading.Event | None = None) -> bytes:
        check_cancelled(cancel)
        try:
            return (self.root / path).read_bytes()
        except OSError as e:
            raise StorageError(f"failed to read '{path}': {e}", path=path) from e
