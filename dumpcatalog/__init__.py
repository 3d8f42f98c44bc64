"""
dumpcatalog: discover what a logical SQL dump contains before importing it.

Architecture:
    Storage → Scan (SourceScanner) → Route (NameRoutingPass) → Assemble → Sort → Catalog

Layers:
    - storage/: Listing and reading the dump (local directory, in-memory)
    - rules/: File classification, table filter and table routing rules
    - ingestion/: The loading pipeline that turns files into a Catalog
    - domain/: Source files, tables and databases
    - sql/: Reading DDL statements back out of schema files

Key Concepts:
    - Files are classified by path only; nothing is read until DDL is asked for
    - Tables are ordered smallest first, chunks by their sort key
    - Hitting the file limit still returns the files found so far
"""

__version__ = "0.1.0"
