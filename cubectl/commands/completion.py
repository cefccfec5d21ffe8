"""
Completion Command

Install the bash programmable completion script. Host names for -h are
completed from the same SSH/hosts files used for wildcard resolution.
"""

from typing import List

import click
from click.shell_completion import BashComplete, CompletionItem

from cubectl.base import BaseCommand
from cubectl.config import Settings
from cubectl.constants import COMPLETION_FILE_NAME, COMPLETION_FILE_PERMISSIONS
from cubectl.core import HostResolver
from cubectl.ui_components import print_progress

PROG_NAME = "cubectl"
COMPLETE_VAR = "_CUBECTL_COMPLETE"


def complete_hosts(ctx, param, incomplete: str) -> List[CompletionItem]:
    """shell_complete callback for the -h option."""
    return [
        CompletionItem(host)
        for host in HostResolver().candidates
        if host.startswith(incomplete)
    ]


class CompletionCommand(BaseCommand):
    """Write click's bash completion script into the completion directory."""

    def __init__(self, cli_command: click.Command, settings: Settings):
        super().__init__()
        self.cli_command = cli_command
        self.settings = settings

    def completion_source(self) -> str:
        return BashComplete(self.cli_command, {}, PROG_NAME, COMPLETE_VAR).source()

    def execute(self) -> None:
        directory = self.settings.completion_dir_expanded
        if not directory.is_dir():
            print_progress(
                f"No directory {directory} found, skipping Bash programmable "
                "completion installation."
            )
            return

        target = directory / COMPLETION_FILE_NAME
        try:
            target.write_text(self.completion_source())
            target.chmod(COMPLETION_FILE_PERMISSIONS)
        except PermissionError:
            print_progress(f"Could not create {target}")
            print_progress("You may need to try with sudo. For example:")
            print_progress(f"  sudo {PROG_NAME} -i && . {target}")
            raise SystemExit(1)

        print_progress(f"Installed Bash programmable completion script into {target}")
        print_progress(
            f"Run '. {target}' once; subsequent shells will source it automatically."
        )
