"""Scan command for dumpcatalog CLI."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console

from dumpcatalog.cli import RichCommand, format_warning
from dumpcatalog.cli.utils import (
    build_catalog_tree,
    human_size,
    report_exception,
    resolve_config,
)
from dumpcatalog.core.logging import configure_logging
from dumpcatalog.errors import DumpCatalogError
from dumpcatalog.ingestion import load_catalog

console = Console()
err_console = Console(stderr=True)

# exit status when the scan ceiling truncated the catalog
EXIT_PARTIAL = 2


@click.command(cls=RichCommand)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to dumpcatalog.yml (auto-detected if not specified)",
)
@click.option(
    "--source",
    "-s",
    type=click.Path(path_type=Path),
    help="Dump directory (overrides the config file's source)",
)
@click.option(
    "--max-scan-files",
    type=click.IntRange(min=0),
    default=None,
    help="Stop after this many files (0 = no limit)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the catalog as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Log every routed file")
@click.option(
    "--debug",
    is_flag=True,
    help="Show full exception stacktraces for troubleshooting",
)
@click.pass_context
def scan(
    ctx: click.Context,
    config: Path | None,
    source: Path | None,
    max_scan_files: int | None,
    as_json: bool,
    verbose: bool,
    debug: bool,
) -> None:
    """Scan a dump and show its databases and tables in import order.

    Tables are listed smallest first, the order they would be imported in.
    When the file limit is hit, the files found so far are still shown
    and the command exits with status 2.

    ## Examples

    Scan the dump configured in dumpcatalog.yml:

        $ dumpcatalog scan

    Scan a directory directly, as JSON:

        $ dumpcatalog scan --source ./dump --json
    """
    configure_logging(log_level="DEBUG" if verbose else "WARNING", color=not as_json)
    cfg = resolve_config(console, config, source, debug)

    try:
        result = load_catalog(cfg, max_scan_files=max_scan_files)
    except DumpCatalogError as e:
        report_exception(console, "Scan failed", e, debug)
        raise click.ClickException(str(e))

    catalog = result.catalog
    if as_json:
        payload = catalog.to_dict()
        payload["partial"] = result.partial
        click.echo(json.dumps(payload, indent=2))
    else:
        console.print(build_catalog_tree(catalog))
        table_count = sum(len(db.tables) for db in catalog.databases)
        total_size = sum(t.total_size for db in catalog.databases for t in db.tables)
        console.print(
            f"\n[dim]{len(catalog.databases)} databases, {table_count} tables, "
            f"{catalog.file_count} files, {human_size(total_size)} of data[/dim]"
        )

    if result.error is not None:
        err_console.print(
            format_warning(
                str(result.error),
                "Only files found before the limit are listed. "
                "Raise max_scan_files to scan the whole source.",
            )
        )
        ctx.exit(EXIT_PARTIAL)
