"""
cubectl - UI Components
Standardized console lines, host labels and error output
"""

from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.markup import escape

# Color scheme
BRAND_COLOR = "color(214)"
SUCCESS_COLOR = "green"
WARNING_COLOR = "yellow"
ERROR_COLOR = "red"

console = Console()
err_console = Console(stderr=True)


def timestamp() -> str:
    """Timestamp prefix used on progress lines."""
    return datetime.now().strftime("%a %b %d %H:%M:%S %Y")


def host_label(host: str, ok: bool = True) -> str:
    """
    Colored [host] label.

    Args:
        host: Host name
        ok: Green when True, red otherwise
    """
    color = SUCCESS_COLOR if ok else ERROR_COLOR
    return f"[{color}]\\[{escape(host)}][/{color}]"


def print_progress(message: str, host: Optional[str] = None) -> None:
    """Print a timestamped progress line, optionally labelled with a host."""
    prefix = f"[dim]\\[{timestamp()}][/dim] "
    if host is not None:
        prefix += host_label(host) + " "
    console.print(prefix + escape(message), highlight=False, soft_wrap=True)


def print_error(message: str, context: Optional[str] = None) -> None:
    """Print a clearly marked error line to stderr."""
    err_console.print(
        f"\n[bold {ERROR_COLOR}]✗ Error:[/bold {ERROR_COLOR}] {escape(message)}",
        highlight=False,
        soft_wrap=True,
    )
    if context:
        err_console.print(
            f"  [{BRAND_COLOR}]{escape(context)}[/{BRAND_COLOR}]", soft_wrap=True
        )
    err_console.print()


def print_warning(message: str) -> None:
    console.print(f"[{WARNING_COLOR}]⚠[/{WARNING_COLOR}] [dim]{escape(message)}[/dim]")
