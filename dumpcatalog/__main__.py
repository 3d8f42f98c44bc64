"""Command-line interface for dumpcatalog."""

from __future__ import annotations

import click

from dumpcatalog.cli import RichGroup
from dumpcatalog.cli.commands import init, scan, schema, validate


@click.group(cls=RichGroup)
@click.version_option(package_name="dumpcatalog")
def cli() -> None:
    """Catalog the databases, tables and data files of a SQL dump.

    Config-driven scan:

        $ dumpcatalog scan

    Or point at a directory directly:

        $ dumpcatalog scan --source ./dump
    """
    pass


cli.add_command(scan)
cli.add_command(schema)
cli.add_command(validate)
cli.add_command(init)


if __name__ == "__main__":
    cli()
