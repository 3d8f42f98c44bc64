"""CLI utilities for dumpcatalog.

Rich-based formatting helpers and the Click command classes shared by
the commands in ``dumpcatalog.cli.commands``.
"""

from __future__ import annotations

from dumpcatalog.cli.formatting import (
    format_success,
    format_warning,
)
from dumpcatalog.cli.help_formatter import RichCommand, RichGroup

__all__ = [
    "format_success",
    "format_warning",
    "RichCommand",
    "RichGroup",
]
