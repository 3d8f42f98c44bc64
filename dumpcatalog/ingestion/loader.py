"""CatalogLoader - runs scan, route, assemble and sort for one dump."""

from __future__ import annotations

import threading

from dumpcatalog.config import LoaderConfig
from dumpcatalog.core.logging import LogContext, get_logger
from dumpcatalog.domain.catalog import Catalog, LoadResult
from dumpcatalog.errors import ConfigConflictError, InvalidConfigError
from dumpcatalog.ingestion.assembler import CatalogAssembler, DuplicatePolicy
from dumpcatalog.ingestion.routing import NameRoutingPass
from dumpcatalog.ingestion.scanner import SourceScanner
from dumpcatalog.ingestion.sorter import sort_databases
from dumpcatalog.rules.file_router import DEFAULT_FILE_ROUTE_RULES, FileRouter
from dumpcatalog.rules.table_filter import (
    DEFAULT_FILTER_RULES,
    Filter,
    LegacyFilter,
    TableFilter,
)
from dumpcatalog.rules.table_router import TableRouter
from dumpcatalog.storage import LocalStorage, Storage, check_cancelled

logger = get_logger(__name__)


class CatalogLoader:
    """
    Build a Catalog from a dump.

    Rules are compiled once when the loader is created; each call to
    ``load`` is an independent pass over the storage, so one loader (and
    one storage handle) can be reused.
    """

    def __init__(
        self,
        config: LoaderConfig,
        storage: Storage | None = None,
        max_scan_files: int | None = None,
    ) -> None:
        """Set up the loader.

        Args:
            config: Loader configuration
            storage: Storage to read from; defaults to the local source directory
            max_scan_files: Overrides ``config.max_scan_files`` when given

        Raises:
            ConfigConflictError: Mutually exclusive options are both set
            InvalidConfigError: A filter, route or file rule is malformed
        """
        self.config = config
        self.storage: Storage = storage if storage is not None else LocalStorage(config.source_path)
        self.max_scan_files = (
            config.max_scan_files if max_scan_files is None else max_scan_files
        )

        if config.routes and config.files:
            raise ConfigConflictError(
                "table route is deprecated, can't config both [routes] and [files]"
            )
        if config.has_legacy_black_white_list and list(config.filter) != DEFAULT_FILTER_RULES:
            raise ConfigConflictError("filter and black_white_list cannot be both defined")

        self.table_router: TableRouter | None = None
        if config.routes:
            try:
                self.table_router = TableRouter(config.routes, config.case_sensitive)
            except InvalidConfigError as e:
                raise InvalidConfigError(f"invalid table route rule: {e}") from e

        try:
            self.table_filter: Filter = self._build_filter(config)
        except InvalidConfigError as e:
            raise InvalidConfigError(f"parse filter failed: {e}") from e

        file_rules = list(config.files)
        if config.use_default_file_rules:
            file_rules.extend(DEFAULT_FILE_ROUTE_RULES)
        try:
            self.file_router = FileRouter(file_rules)
        except InvalidConfigError as e:
            raise InvalidConfigError(f"parse file routing rule failed: {e}") from e

        self.policy = DuplicatePolicy.for_routing(self.table_router is not None)

    @staticmethod
    def _build_filter(config: LoaderConfig) -> Filter:
        # the legacy lists win when they are set
        if config.has_legacy_black_white_list:
            assert config.black_white_list is not None
            return LegacyFilter(config.black_white_list, config.case_sensitive)
        return TableFilter(config.filter, config.case_sensitive)

    def load(self, cancel: threading.Event | None = None) -> LoadResult:
        """Scan, route, assemble and sort the dump.

        Returns:
            LoadResult. ``error`` is set only when the scan ceiling was hit,
            in which case the catalog covers the files kept before it.

        Raises:
            StorageError: Listing the storage failed
            FileRouteError: A file classification rule failed
            TableRouteError: A table route failed
            RoutingInvariantError: Internal routing bookkeeping went wrong
            InvalidSchemaFileError: Duplicate schema file, or orphan view in a
                complete scan
            LoadCancelledError: ``cancel`` was set
        """
        with LogContext(source=self.storage.describe()):
            scanner = SourceScanner(
                self.storage,
                self.file_router,
                self.table_filter,
                max_scan_files=self.max_scan_files,
            )
            outcome = scanner.scan(cancel=cancel)
            buckets = outcome.buckets

            if self.table_router is not None:
                NameRoutingPass(self.table_router).run(buckets)

            assembler = CatalogAssembler(
                self.config.character_set,
                self.policy,
                partial_scan=outcome.error is not None,
            )
            databases = assembler.assemble(buckets)
            sort_databases(databases)

            check_cancelled(cancel)
            catalog = Catalog(
                databases=databases,
                storage=self.storage,
                character_set=self.config.character_set,
                table_filter=self.table_filter,
                table_router=self.table_router,
                file_router=self.file_router,
            )
            logger.info(
                "catalog_loaded",
                databases=len(databases),
                files=buckets.file_count,
                partial=outcome.error is not None,
            )
            return LoadResult(catalog=catalog, error=outcome.error)


def load_catalog(
    config: LoaderConfig,
    storage: Storage | None = None,
    max_scan_files: int | None = None,
    cancel: threading.Event | None = None,
) -> LoadResult:
    """Load a catalog in one call. See CatalogLoader.load."""
    loader = CatalogLoader(config, storage=storage, max_scan_files=max_scan_files)
    return loader.load(cancel=cancel)
