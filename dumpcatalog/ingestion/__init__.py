"""Ingestion layer - scanning, routing, assembling and ordering a dump."""

from dumpcatalog.ingestion.assembler import CatalogAssembler, DuplicatePolicy
from dumpcatalog.ingestion.loader import CatalogLoader, load_catalog
from dumpcatalog.ingestion.routing import DatabaseRefCounts, NameRoutingPass
from dumpcatalog.ingestion.scanner import ScanBuckets, ScanOutcome, SourceScanner
from dumpcatalog.ingestion.sorter import sort_databases

__all__ = [
    "CatalogAssembler",
    "CatalogLoader",
    "DatabaseRefCounts",
    "DuplicatePolicy",
    "NameRoutingPass",
    "ScanBuckets",
    "ScanOutcome",
    "SourceScanner",
    "load_catalog",
    "sort_databases",
]
