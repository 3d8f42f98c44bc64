"""Storage backends for reading dumps."""

from dumpcatalog.storage.base import Storage, WalkVisitor, check_cancelled
from dumpcatalog.storage.local import LocalStorage
from dumpcatalog.storage.memory import MemoryStorage

__all__ = ["Storage", "WalkVisitor", "check_cancelled", "LocalStorage", "MemoryStorage"]
