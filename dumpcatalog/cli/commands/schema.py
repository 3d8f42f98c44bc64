"""Schema command for dumpcatalog CLI."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from dumpcatalog.cli import RichCommand
from dumpcatalog.cli.utils import report_exception, resolve_config
from dumpcatalog.core.logging import configure_logging
from dumpcatalog.errors import DumpCatalogError
from dumpcatalog.ingestion import load_catalog

console = Console()


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
@click.option("--database", "-d", "databases", multiple=True, help="Only these databases")
@click.option(
    "--debug",
    is_flag=True,
    help="Show full exception stacktraces for troubleshooting",
)
def schema(
    config: Path | None,
    source: Path | None,
    databases: tuple[str, ...],
    debug: bool,
) -> None:
    """Print the DDL statements of the dump in import order.

    Databases without a schema file get a CREATE DATABASE IF NOT EXISTS
    statement. Tables without a schema file are reported as errors.

    ## Examples

        $ dumpcatalog schema --source ./dump --database shop
    """
    configure_logging(log_level="WARNING")
    cfg = resolve_config(console, config, source, debug)

    try:
        catalog = load_catalog(cfg).unwrap()
    except DumpCatalogError as e:
        report_exception(console, "Scan failed", e, debug)
        raise click.ClickException(str(e))

    failures = 0
    for db in catalog.databases:
        if databases and db.name not in databases:
            continue
        try:
            ddl = db.get_schema(catalog.storage).rstrip(";")
            click.echo(f"{ddl};")
        except DumpCatalogError as e:
            report_exception(console, f"Database {db.name}", e, debug)
            failures += 1
            continue
        for table in [*db.tables, *db.views]:
            try:
                click.echo(table.get_schema(catalog.storage))
            except DumpCatalogError as e:
                report_exception(console, f"Table {db.name}.{table.name}", e, debug)
                failures += 1

    if failures:
        raise click.ClickException(f"{failures} schema statements could not be read")
