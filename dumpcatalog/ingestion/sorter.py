"""Deterministic ordering of the assembled catalog."""

from __future__ import annotations

from dumpcatalog.domain.catalog import DatabaseMeta


def sort_databases(databases: list[DatabaseMeta]) -> None:
    """Order tables and data files in place.

    Within a database, smaller tables come first so that one huge table
    does not hold index workers while many small ones wait. Within a
    table, data files follow their sort key. Both sorts are stable and
    databases keep the order they were first seen in.
    """
    for db in databases:
        db.tables.sort(key=lambda table: table.total_size)
        for table in db.tables:
            table.data_files.sort(key=lambda info: info.file_meta.sort_key)
