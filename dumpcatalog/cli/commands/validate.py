"""Validate command for dumpcatalog CLI."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from dumpcatalog.cli import RichCommand, format_success, format_warning
from dumpcatalog.cli.utils import report_exception, resolve_config
from dumpcatalog.core.logging import configure_logging
from dumpcatalog.errors import DumpCatalogError
from dumpcatalog.ingestion import load_catalog
from dumpcatalog.sql import inspect_create_table

console = Console()


@click.command(cls=RichCommand)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to dumpcatalog.yml config file",
)
@click.option(
    "--source",
    "-s",
    type=click.Path(path_type=Path),
    help="Dump directory (overrides the config file's source)",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Show full exception stacktraces for troubleshooting",
)
def validate(config: Path | None, source: Path | None, debug: bool) -> None:
    """Validate configuration and the dump layout.

    Checks that:
    - dumpcatalog.yml is valid
    - Source directory exists
    - Every file routes cleanly and no schema file is duplicated
    - Every table has a schema file
    - Table schema files parse as CREATE TABLE statements (warnings only)

    ## Examples

    Validate using dumpcatalog.yml in current directory:

        $ dumpcatalog validate

    Validate before importing:

        $ dumpcatalog validate && ./import.sh
    """
    configure_logging(log_level="WARNING")
    cfg = resolve_config(console, config, source, debug)
    console.print("[green]Config valid[/green]")

    if not cfg.source_path.is_dir():
        console.print(f"[red]Source directory not found:[/red] {cfg.source_path}")
        raise click.ClickException(f"Source directory not found: {cfg.source_path}")
    console.print(f"[green]Source directory exists:[/green] {cfg.source_path}")

    try:
        result = load_catalog(cfg)
    except DumpCatalogError as e:
        report_exception(console, "Catalog error", e, debug)
        raise click.ClickException(str(e))

    catalog = result.catalog
    table_count = sum(len(db.tables) for db in catalog.databases)
    view_count = sum(len(db.views) for db in catalog.databases)
    console.print(
        f"[green]Catalog assembled:[/green] {len(catalog.databases)} databases, "
        f"{table_count} tables, {view_count} views"
    )

    missing = [
        f"{db.name}.{table.name}"
        for db in catalog.databases
        for table in db.tables
        if not table.has_schema_file
    ]
    if missing:
        console.print(
            format_warning(
                f"{len(missing)} tables have no schema file: {', '.join(missing)}",
                "Add -schema.sql files for them or create the tables before importing.",
            )
        )
        raise click.ClickException("Tables without schema files")

    ddl_warnings: list[str] = []
    for db in catalog.databases:
        for table in db.tables:
            try:
                text = table.get_schema(catalog.storage)
            except DumpCatalogError as e:
                report_exception(console, f"Table {db.name}.{table.name}", e, debug)
                raise click.ClickException(str(e))
            check = inspect_create_table(text)
            if not check.ok:
                ddl_warnings.append(f"{table.schema_file.path}: {check.error}")
            elif (
                catalog.table_router is None
                and check.created is not None
                and check.created.lower() != table.name.lower()
            ):
                # routed tables keep their source names in the DDL
                ddl_warnings.append(
                    f"{table.schema_file.path}: creates '{check.created}', "
                    f"expected '{table.name}'"
                )
    if ddl_warnings:
        console.print(
            format_warning(
                escape("\n".join(ddl_warnings)),
                "These statements could not be checked or name another table.",
            )
        )

    if result.error is not None:
        console.print(
            format_warning(
                str(result.error),
                "Only files found before the limit were checked.",
            )
        )
        raise click.ClickException(str(result.error))

    console.print(format_success("Dump is ready to import"))
