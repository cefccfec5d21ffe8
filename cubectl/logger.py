"""
Logging system for cubectl
Writes a per-run log file and keeps console output clean
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, TextIO

from rich.markup import escape
from rich.text import Text

from cubectl.constants import LOG_DATE_FORMAT, LOG_TIME_FORMAT
from cubectl.ui_components import console, host_label, print_progress
from cubectl.utils import strip_ansi


class RunLogger:
    """
    Manages logging for one cubectl invocation
    - Writes transport commands and remote output to a log file in real-time
    - Prints progress lines unless quiet, transport commands when debugging
    - Reports per-host failures inline
    """

    def __init__(
        self,
        log_dir: Path,
        operation: str = "run",
        debug: bool = False,
        quiet: bool = False,
        details: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize logger

        Args:
            log_dir: Root directory for log files
            operation: Operation name used in the file name
            debug: If True, show transport commands and successes
            quiet: If True, hide progress lines
            details: Key/value pairs written into the log header
        """
        self.operation = operation
        self.debug = debug
        self.quiet = quiet
        self.log_file: Optional[TextIO] = None
        self.has_errors = False

        # Structure: {log_dir}/{date}/{time}_{operation}.log
        now = datetime.now()
        day_dir = Path(log_dir) / now.strftime(LOG_DATE_FORMAT)
        day_dir.mkdir(parents=True, exist_ok=True)
        self.log_path = day_dir / f"{now.strftime(LOG_TIME_FORMAT)}_{operation}.log"

        # Line buffered for real-time tailing
        self.log_file = open(self.log_path, "w", buffering=1)
        self._write_log_header(details or {})

    def _write_log_header(self, details: Dict[str, str]):
        """Write log file header"""
        lines = ["=" * 80, "cubectl Run Log", "=" * 80]
        lines.append(f"Operation: {self.operation}")
        for key, value in details.items():
            lines.append(f"{key}: {value}")
        lines.append(f"Started: {datetime.now().isoformat()}")
        lines.append("=" * 80)
        self.log_file.write("\n".join(lines) + "\n\n")

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message to file

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG)
        """
        if self.log_file:
            stamp = datetime.now().strftime("%H:%M:%S")
            self.log_file.write(f"[{stamp}] [{level}] {message}\n")

    def log_command(self, command: str, host: Optional[str] = None):
        """Log a transport command; echoed to console in debug mode"""
        self.log(f"Executing: {command}", "DEBUG")
        if self.debug:
            print_progress(f"Executing {command} ...", host=host)

    def log_output(self, line: str, host: str):
        """
        Log one line of remote output and echo it to the console

        Args:
            line: Output line (may contain ANSI colors)
            host: Host that produced the line
        """
        if self.log_file:
            self.log_file.write(f"  [{host}] {strip_ansi(line)}\n")
        console.print(
            Text.assemble(Text.from_markup(host_label(host)), " ", Text.from_ansi(line)),
            soft_wrap=True,
        )

    def progress(self, message: str, host: Optional[str] = None):
        """Progress line; hidden in quiet mode"""
        self.log(message)
        if not self.quiet:
            print_progress(message, host=host)

    def host_status(
        self, host: str, message: str, ok: bool, context: Optional[str] = None
    ):
        """
        Report the outcome of one step on one host

        Failures are always shown; successes only in debug mode.
        """
        if ok:
            self.log(f"[{host}] {message}")
            if self.debug:
                console.print(f"{host_label(host)} {escape(message)}", highlight=False)
            return

        self.log_error(message, context=context or f"Host: {host}")
        console.print(f"{host_label(host, ok=False)} {escape(message)}", highlight=False)

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Write an error block to the log file

        Args:
            error: Error message
            context: Additional context (e.g., failing host)
        """
        self.has_errors = True
        if not self.log_file:
            return

        block = f"\n{'!' * 80}\nERROR OCCURRED\n{'!' * 80}\n{error}\n"
        if context:
            block += f"\nContext: {context}\n"
        block += f"{'!' * 80}\n\n"
        self.log_file.write(block)

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = (
                f"\n{'=' * 80}\n"
                f"Completed: {datetime.now().isoformat()}\n"
                f"Status: {'FAILED' if self.has_errors else 'SUCCESS'}\n"
                f"{'=' * 80}\n"
            )
            self.log_file.write(footer)
            self.log_file.close()
            self.log_file = None

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        """Context manager exit"""
        if exc_type is not None and exc_type != SystemExit:
            self.log_error(
                str(exc_val) if exc_val else "Operation failed",
                context=f"{exc_type.__name__}",
            )
        self.close()
        return False  # Don't suppress exceptions
