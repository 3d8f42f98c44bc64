"""Scanner - walks the storage once and buckets classified files."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from dumpcatalog.core.logging import get_logger
from dumpcatalog.domain.source import FileInfo, SourceFileMeta, SourceType, TableName
from dumpcatalog.errors import StorageError, TooManySourceFilesError
from dumpcatalog.rules.file_router import FileRouter
from dumpcatalog.rules.table_filter import Filter
from dumpcatalog.storage import Storage

logger = get_logger(__name__)


@dataclass
class ScanBuckets:
    """Classified files, each list in walk order."""

    db_schemas: list[FileInfo] = field(default_factory=list)
    table_schemas: list[FileInfo] = field(default_factory=list)
    view_schemas: list[FileInfo] = field(default_factory=list)
    table_datas: list[FileInfo] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return (
            len(self.db_schemas)
            + len(self.table_schemas)
            + len(self.view_schemas)
            + len(self.table_datas)
        )

    def add(self, info: FileInfo) -> None:
        source_type = info.file_meta.type
        if source_type == SourceType.SCHEMA_SCHEMA:
            self.db_schemas.append(info)
        elif source_type == SourceType.TABLE_SCHEMA:
            self.table_schemas.append(info)
        elif source_type == SourceType.VIEW_SCHEMA:
            self.view_schemas.append(info)
        elif source_type.is_data:
            self.table_datas.append(info)


@dataclass
class ScanOutcome:
    """Buckets from a scan, with the ceiling error if the walk was cut short."""

    buckets: ScanBuckets
    error: TooManySourceFilesError | None = None


class SourceScanner:
    """
    Walk a storage root, classify every file and keep the wanted ones.

    The walk order of the storage decides the bucket order, so scanning an
    unchanged source twice yields identical buckets.
    """

    def __init__(
        self,
        storage: Storage,
        file_router: FileRouter,
        table_filter: Filter,
        max_scan_files: int = 0,
    ) -> None:
        self.storage = storage
        self.file_router = file_router
        self.table_filter = table_filter
        self.max_scan_files = max_scan_files

    def should_skip(self, table_name: TableName) -> bool:
        if not table_name.name:
            return not self.table_filter.match_schema(table_name.schema_name)
        return not self.table_filter.match_table(table_name.schema_name, table_name.name)

    def scan(self, cancel: threading.Event | None = None) -> ScanOutcome:
        """Scan the storage.

        Returns:
            ScanOutcome; when more than ``max_scan_files`` files were kept the
            walk stops, and the outcome carries the buckets filled so far
            together with a TooManySourceFilesError.

        Raises:
            FileRouteError: A classification rule failed on a path
            StorageError: Listing the storage failed
            LoadCancelledError: ``cancel`` was set during the walk
        """
        buckets = ScanBuckets()

        def visit(path: str, size: int) -> None:
            res = self.file_router.route(path)
            if res is None:
                logger.info("file_filtered_by_file_router", path=path)
                return

            info = FileInfo(
                table_name=TableName(schema=res.schema, name=res.name),
                file_meta=SourceFileMeta(
                    path=path,
                    type=res.type,
                    compression=res.compression,
                    sort_key=res.key,
                    file_size=size,
                ),
            )
            if self.should_skip(info.table_name):
                logger.debug("file_ignored_by_filter", path=path, table=str(info.table_name))
                return

            if self.max_scan_files > 0 and buckets.file_count >= self.max_scan_files:
                raise TooManySourceFilesError(self.max_scan_files)

            buckets.add(info)
            logger.debug(
                "file_routed",
                path=path,
                schema=res.schema,
                table=res.name,
                type=res.type.value,
            )

        try:
            self.storage.walk(visit, cancel=cancel)
        except TooManySourceFilesError as e:
            logger.warning(
                "scan_ceiling_reached",
                max_scan_files=self.max_scan_files,
                kept=buckets.file_count,
            )
            return ScanOutcome(buckets=buckets, error=e)
        except OSError as e:
            raise StorageError(f"list file failed: {e}") from e

        logger.info("scan_finished", files=buckets.file_count)
        return ScanOutcome(buckets=buckets)
