"""Name routing pass - applies table routes to scanned files.

Routing can move every file of a database elsewhere. A per-database
reference count tracks how many files still point at each original
database so that database schema files left without any file can be
dropped once all buckets are routed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from dumpcatalog.core.logging import get_logger
from dumpcatalog.domain.source import FileInfo, SourceFileMeta, SourceType, TableName
from dumpcatalog.errors import DumpCatalogError, RoutingInvariantError, TableRouteError
from dumpcatalog.ingestion.scanner import ScanBuckets

logger = get_logger(__name__)


class Router(Protocol):
    """Anything that can rename a (schema, table) pair."""

    def route(self, schema: str, table: str) -> tuple[str, str]: ...


@dataclass
class _DatabaseRef:
    file_meta: SourceFileMeta
    count: int


class DatabaseRefCounts:
    """Reference counts per database name, local to one routing pass."""

    def __init__(self) -> None:
        self._refs: dict[str, _DatabaseRef] = {}

    @classmethod
    def from_buckets(cls, buckets: ScanBuckets) -> DatabaseRefCounts:
        """Count one reference per database schema file plus one per other file."""
        counts = cls()
        for info in buckets.db_schemas:
            counts._refs[info.schema_name] = _DatabaseRef(file_meta=info.file_meta, count=1)
        for bucket in (buckets.table_schemas, buckets.view_schemas, buckets.table_datas):
            for info in bucket:
                counts._ensure(info.schema_name).count += 1
        return counts

    def _ensure(self, schema: str) -> _DatabaseRef:
        ref = self._refs.get(schema)
        if ref is None:
            # database referenced only by table files: no schema file to reuse
            ref = _DatabaseRef(file_meta=SourceFileMeta(type=SourceType.SCHEMA_SCHEMA), count=0)
            self._refs[schema] = ref
        return ref

    def __contains__(self, schema: object) -> bool:
        return schema in self._refs

    def count(self, schema: str) -> int:
        ref = self._refs.get(schema)
        return ref.count if ref is not None else 0

    def file_meta(self, schema: str) -> SourceFileMeta:
        return self._ensure(schema).file_meta

    def increment(self, schema: str) -> None:
        self._ensure(schema).count += 1

    def decrement(self, schema: str) -> None:
        self._ensure(schema).count -= 1

    def add(self, schema: str, file_meta: SourceFileMeta) -> None:
        self._refs[schema] = _DatabaseRef(file_meta=file_meta, count=1)

    def verify(self) -> None:
        """Raise RoutingInvariantError if any count went negative."""
        for schema, ref in self._refs.items():
            if ref.count < 0:
                raise RoutingInvariantError(schema, ref.count)


class NameRoutingPass:
    """Rewrite the table names of all buckets through a router."""

    def __init__(self, router: Router) -> None:
        self.router = router

    def run(self, buckets: ScanBuckets) -> None:
        """Route every bucket in place.

        Raises:
            TableRouteError: The router failed for some file
            RoutingInvariantError: Reference counting went wrong
        """
        counts = DatabaseRefCounts.from_buckets(buckets)
        self.apply(buckets, counts)
        self.prune(buckets, counts)

    def apply(self, buckets: ScanBuckets, counts: DatabaseRefCounts) -> None:
        for bucket in (
            buckets.db_schemas,
            buckets.table_schemas,
            buckets.view_schemas,
            buckets.table_datas,
        ):
            self._route_bucket(bucket, buckets, counts)

    def _route_bucket(
        self,
        bucket: list[FileInfo],
        buckets: ScanBuckets,
        counts: DatabaseRefCounts,
    ) -> None:
        # schema files synthesized below are appended to db_schemas and
        # must not be routed a second time
        for info in bucket[: len(bucket)]:
            raw_db, raw_table = info.table_name.schema_name, info.table_name.name
            try:
                target_db, target_table = self.router.route(raw_db, raw_table)
            except DumpCatalogError:
                raise
            except Exception as e:
                raise TableRouteError(
                    f"failed to route {info.table_name} from '{info.path}': {e}"
                ) from e

            if target_db != raw_db:
                counts.decrement(raw_db)
                if target_db not in counts:
                    file_meta = counts.file_meta(raw_db)
                    counts.add(target_db, file_meta)
                    buckets.db_schemas.append(
                        FileInfo(table_name=TableName(schema=target_db), file_meta=file_meta)
                    )
                counts.increment(target_db)
                logger.debug(
                    "table_routed",
                    path=info.path,
                    source=str(info.table_name),
                    target_schema=target_db,
                    target_table=target_table,
                )
            info.table_name = TableName(schema=target_db, name=target_table)

    def prune(self, buckets: ScanBuckets, counts: DatabaseRefCounts) -> None:
        """Drop database schema files whose database was routed away entirely."""
        counts.verify()
        remaining: list[FileInfo] = []
        for info in buckets.db_schemas:
            if counts.count(info.schema_name) > 0:
                remaining.append(info)
            else:
                logger.debug("database_routed_away", path=info.path, schema=info.schema_name)
        buckets.db_schemas = remaining
