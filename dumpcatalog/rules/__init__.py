"""Classification, filtering and routing rules."""

from dumpcatalog.rules.file_router import (
    DEFAULT_FILE_ROUTE_RULES,
    FileRouter,
    FileRouteRule,
    RouteResult,
)
from dumpcatalog.rules.table_filter import (
    DEFAULT_FILTER_RULES,
    BlackWhiteList,
    Filter,
    LegacyFilter,
    TableFilter,
    TableRef,
)
from dumpcatalog.rules.table_router import RouteRule, TableRouter

__all__ = [
    # Classification
    "DEFAULT_FILE_ROUTE_RULES",
    "FileRouter",
    "FileRouteRule",
    "RouteResult",
    # Filtering
    "DEFAULT_FILTER_RULES",
    "BlackWhiteList",
    "Filter",
    "LegacyFilter",
    "TableFilter",
    "TableRef",
    # Routing
    "RouteRule",
    "TableRouter",
]
