"""CLI commands for dumpcatalog.

Commands are registered on the group in __main__.py.
"""

from __future__ import annotations

from dumpcatalog.cli.commands.init_cmd import init
from dumpcatalog.cli.commands.scan import scan
from dumpcatalog.cli.commands.schema import schema
from dumpcatalog.cli.commands.validate import validate

__all__ = [
    "init",
    "scan",
    "schema",
    "validate",
]
