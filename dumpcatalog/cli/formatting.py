"""Rich formatting helpers for CLI output.

Warning and success messages are shown as bordered panels so they stand
out from the catalog tree and DDL text printed around them.
"""

from __future__ import annotations

from rich.panel import Panel


def _panel(message: str, extra: str | None, title: str, color: str) -> Panel:
    content = f"[bold {color}]{message}[/bold {color}]"
    if extra:
        content += f"\n\n[dim]{extra}[/dim]"
    return Panel(
        content,
        title=f"[bold {color}]{title}[/bold {color}]",
        border_style=color,
        width=78,
        expand=False,
    )


def format_warning(message: str, context: str | None = None) -> Panel:
    """Create formatted warning panel.

    Args:
        message: Warning message, may contain Rich markup
        context: Optional dimmed text shown below the message

    Returns:
        Panel with yellow border
    """
    return _panel(message, context, "Warning", "yellow")


def format_success(message: str, details: str | None = None) -> Panel:
    """Create formatted success panel.

    Args:
        message: Success message, prefixed with a check mark
        details: Optional dimmed text shown below the message

    Returns:
        Panel with green border
    """
    return _panel(f"✓ {message}", details, "Success", "green")
