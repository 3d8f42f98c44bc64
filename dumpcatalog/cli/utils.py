"""CLI utility functions for dumpcatalog."""

from __future__ import annotations

import traceback
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from dumpcatalog.config import LoaderConfig, find_config, load_config
from dumpcatalog.domain import Catalog
from dumpcatalog.errors import DumpCatalogInternalError


def human_size(size: int) -> str:
    """Format a byte count for display (1536 -> '1.5 KiB')."""
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024:
            return f"{size} B" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TiB"


def build_catalog_tree(catalog: Catalog) -> Tree:
    """Build a Rich Tree of databases, tables (in import order) and views."""
    tree = Tree(f"[bold]{escape(catalog.storage.describe())}[/bold]")
    for db in catalog.databases:
        schema_hint = "" if db.has_schema_file else " [dim](no schema file)[/dim]"
        db_node = tree.add(f"[blue]{escape(db.name)}[/blue]{schema_hint}")
        for table in db.tables:
            chunks = len(table.data_files)
            db_node.add(
                f"[green]{escape(table.name)}[/green] "
                f"[dim]{human_size(table.total_size)}, {chunks} "
                f"{'chunk' if chunks == 1 else 'chunks'}[/dim]"
            )
        for view in db.views:
            db_node.add(f"[yellow]{escape(view.name)}[/yellow] [dim](view)[/dim]")
    return tree


def resolve_config(
    console: Console,
    config: Path | None,
    source: Path | None,
    debug: bool = False,
) -> LoaderConfig:
    """Load the config for a command.

    An explicit ``--config`` wins, then ``--source`` (with defaults for
    everything else), then a dumpcatalog.yml found from the working
    directory upwards.
    """
    try:
        if config is not None:
            cfg = load_config(config)
        elif source is not None:
            return LoaderConfig(source=str(source))
        else:
            found = find_config()
            if found is None:
                raise click.ClickException(
                    "No dumpcatalog.yml found. Pass --source or --config, or run "
                    "'dumpcatalog init'"
                )
            cfg = load_config(found)
    except FileNotFoundError as e:
        report_exception(console, "Config file not found", e, debug)
        raise click.ClickException(str(e))
    except yaml.YAMLError as e:
        report_exception(console, "YAML parsing error", e, debug)
        raise click.ClickException(str(e))
    except ValidationError as e:
        report_exception(console, "Config validation error", e, debug)
        raise click.ClickException(str(e))

    if source is not None:
        cfg = cfg.model_copy(update={"source_dir": str(source)})
    return cfg


def report_exception(console: Console, label: str, error: Exception, debug: bool) -> None:
    """Print an error line, with the traceback in debug mode."""
    if debug:
        console.print(escape(traceback.format_exc()))
    if isinstance(error, DumpCatalogInternalError):
        label = f"{label} (internal error, please report a bug)"
    console.print(f"[red]{label}:[/red] {escape(str(error))}")
