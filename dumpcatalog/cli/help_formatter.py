"""Click command classes with a wider help layout.

Subcommands carry long option descriptions (rule syntax, ceiling
behaviour), so help is rendered at a fixed width instead of following
the terminal.
"""

from __future__ import annotations

import click

HELP_WIDTH = 88


class _WideHelp:
    """Render ``--help`` at HELP_WIDTH columns instead of the terminal width."""

    def get_help(self, ctx: click.Context) -> str:
        """Format the help page for this command.

        Args:
            ctx: Click context of the command being described

        Returns:
            Formatted help text string
        """
        formatter = click.HelpFormatter(width=HELP_WIDTH)
        self.format_help(ctx, formatter)  # type: ignore[attr-defined]
        return formatter.getvalue()


class RichCommand(_WideHelp, click.Command):
    """Command used by every dumpcatalog subcommand.

    Pass as ``cls=RichCommand`` to ``@click.command``.
    """


class RichGroup(_WideHelp, click.Group):
    """Group used by the ``dumpcatalog`` entry point."""
