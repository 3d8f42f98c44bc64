"""Storage protocol - the read-only view of a dump that the loader consumes."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from dumpcatalog.errors import LoadCancelledError

# visit(path, size) is called once per file during a walk
WalkVisitor = Callable[[str, int], None]


@runtime_checkable
class Storage(Protocol):
    """Protocol for dump storage backends.

    Paths are relative to the storage root and always use '/' separators.
    A storage handle holds no per-load state and may be shared between
    loads.
    """

    def walk(self, visit: WalkVisitor, cancel: threading.Event | None = None) -> None:
        """Call ``visit(path, size)`` for every file, in a repeatable order.

        Entries are visited in lexicographic order within each directory.
        Exceptions raised by ``visit`` stop the walk and propagate.
        """
        ...

    def exists(self, path: str, cancel: threading.Event | None = None) -> bool:
        """Check whether a file exists."""
        ...

    def read_all(self, path: str, cancel: threading.Event | None = None) -> bytes:
        """Read the whole content of a file."""
        ...

    def describe(self) -> str:
        """Human-readable location of the storage root."""
        ...


def check_cancelled(cancel: threading.Event | None) -> None:
    """Raise LoadCancelledError if the cancel event has been set."""
    if cancel is not None and cancel.is_set():
        raise LoadCancelledError()
