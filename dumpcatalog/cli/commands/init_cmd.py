"""Init command for dumpcatalog CLI."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from dumpcatalog.cli import RichCommand

console = Console()

TEMPLATE = """\
# dumpcatalog configuration

# Dump directory (relative paths are resolved against this file)
source: {source}

# Encoding of schema files: auto, utf8mb4, binary, gb18030, gbk, latin1
character_set: auto

# Stop scanning after this many files (0 = no limit)
max_scan_files: 0

# Match database and table names case-sensitively
case_sensitive: false

# Table filter; later rules win, '!' excludes
filter:
  - "*.*"
  - "!mysql.*"
  - "!sys.*"
  - "!INFORMATION_SCHEMA.*"
  - "!PERFORMANCE_SCHEMA.*"
  - "!METRICS_SCHEMA.*"
  - "!INSPECTION_SCHEMA.*"

# Merge sharded tables (cannot be combined with 'files')
# routes:
#   - schema_pattern: "shard_*"
#     table_pattern: "orders_*"
#     target_schema: shop
#     target_table: orders

# Custom file classification rules (built-in rules still apply
# unless default_file_rules is false)
# files:
#   - pattern: '(?i)^(?:[^/]*/)*([a-z0-9_]+)\\.([a-z0-9_]+)\\.csv$'
#     schema: $1
#     table: $2
#     type: csv
"""


@click.command(cls=RichCommand)
@click.option(
    "--source",
    "-s",
    default="./dump",
    show_default=True,
    help="Dump directory to put in the config",
)
def init(source: str) -> None:
    """Create a dumpcatalog.yml config file.

    Generates a starter config file in the current directory
    with the default filter rules.

    ## Examples

    Create a new config file:

        $ dumpcatalog init --source ./backup

    Then edit dumpcatalog.yml and run:

        $ dumpcatalog scan
    """
    config_path = Path("dumpcatalog.yml")

    if config_path.exists():
        console.print(f"[yellow]{config_path} already exists[/yellow]")
        raise click.ClickException("Config file already exists")

    config_path.write_text(TEMPLATE.format(source=source), encoding="utf-8")
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nEdit the file and run:")
    console.print("  dumpcatalog scan")
