"""
Base Command Class

Abstract base for cubectl commands.
Provides common error handling and output helpers.
"""

from abc import ABC, abstractmethod
from typing import Optional

import click
from rich.markup import escape

from cubectl.exceptions import CubeError, CubeUsageError
from cubectl.logger import RunLogger
from cubectl.ui_components import console, print_error, print_progress


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Error handling (pre-flight errors abort with exit code 1)
    - Usage text for usage errors
    - Consistent console output
    """

    def __init__(self, debug: bool = False, quiet: bool = False):
        self.debug = debug
        self.quiet = quiet
        self.console = console
        self.logger: Optional[RunLogger] = None

    def print_success(self, message: str) -> None:
        """Print success message (skip in quiet mode)."""
        if not self.quiet:
            self.console.print(f"[green]✓ {escape(message)}[/green]")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠ {escape(message)}[/yellow]")

    def print_dim(self, message: str) -> None:
        """Print dim message (debug mode only)."""
        if self.debug:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print_command(self, command_line: str) -> None:
        """Echo a local tool command line (debug mode only)."""
        if self.debug:
            print_progress(f"Executing {command_line} ...")

    def show_usage(self) -> None:
        """Print the help text of the running click command to stderr."""
        ctx = click.get_current_context(silent=True)
        if ctx is not None:
            click.echo(ctx.get_help(), err=True)

    def handle_error(self, error: CubeError) -> None:
        """
        Handle error with consistent formatting.

        Args:
            error: cubectl error to report
        """
        if self.logger:
            self.logger.log_error(error.message, context=error.context)
        print_error(error.message, error.context)

    @abstractmethod
    def execute(self) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self) -> None:
        """Run command with error handling."""
        try:
            self.execute()
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            if self.logger:
                self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")
            raise SystemExit(130)
        except SystemExit:
            raise
        except CubeUsageError as e:
            self.handle_error(e)
            self.show_usage()
            raise SystemExit(1)
        except CubeError as e:
            self.handle_error(e)
            raise SystemExit(1)
        except PermissionError as e:
            print_error(f"Permission denied: {e}", "Try running with appropriate permissions")
            raise SystemExit(1)
        except FileNotFoundError as e:
            print_error(f"File not found: {e}")
            raise SystemExit(1)
