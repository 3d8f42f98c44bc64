"""In-memory storage, shaped like a flat object store."""

from __future__ import annotations

import threading
from collections.abc import Mapping

from dumpcatalog.errors import StorageError
from dumpcatalog.storage.base import WalkVisitor, check_cancelled


class MemoryStorage:
    """
    Storage over a mapping of object keys to bytes.

    Keys are listed in sorted order, matching how object stores page
    through a bucket.
    """

    def __init__(self, files: Mapping[str, bytes] | None = None, name: str = "memory") -> None:
        self._files: dict[str, bytes] = dict(files or {})
        self.name = name

    def describe(self) -> str:
        return f"memory://{self.name}"

    def put(self, path: str, content: bytes | str) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._files[path] = content

    def walk(self, visit: WalkVisitor, cancel: threading.Event | None = None) -> None:
        for path in sorted(self._files):
            check_cancelled(cancel)
            visit(path, len(self._files[path]))

    def exists(self, path: str, cancel: threading.Event | None = None) -> bool:
        check_cancelled(cancel)
        return path in self._files

    def read_all(self, path: str, cancel: threading.Event | None = None) -> bytes:
        check_cancelled(cancel)
        try:
            return self._files[path]
        except KeyError:
            raise StorageError(f"object not found: {path}", path=path) from None
