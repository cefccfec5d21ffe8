#!/usr/bin/env python3
"""cubectl CLI - Main entry point"""

import functools
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

# Rich-Click: colored help output
import rich_click as click

from cubectl import __version__
from cubectl.commands import (
    CompletionCommand,
    RunCommand,
    SecretsCommand,
    complete_hosts,
)
from cubectl.config import SettingsLoader
from cubectl.constants import SUB_COMMANDS
from cubectl.exceptions import CubeError
from cubectl.models import RunConfig
from cubectl.utils import get_default_user

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.MAX_WIDTH = 100

# OPTIONS: Bold magenta
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_USAGE = "bold yellow"
click.rich_click.STYLE_METAVAR = "bold yellow"
click.rich_click.STYLE_OPTIONS_PANEL_BORDER = "cyan"

console = Console(stderr=True)

CONTEXT_SETTINGS = {
    "help_option_names": ["-?", "--help"],
    # Everything after the first COMMAND word belongs to the remote command
    "allow_interspersed_args": False,
}


def handle_cli_errors(func):
    """Decorator to handle CLI errors gracefully."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CubeError as e:
            console.print(f"\n[bold red]✗ Error:[/bold red] {escape(e.message)}\n")
            sys.exit(1)
        except KeyboardInterrupt:
            console.print("\n\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            sys.exit(130)
        except Exception as e:
            # Unexpected errors
            console.print(f"\n[bold red]✗ Unexpected error:[/bold red] {e}\n")

            # Show traceback if DEBUG env var is set
            if os.environ.get("DEBUG"):
                import traceback

                console.print("[dim]Traceback:[/dim]")
                traceback.print_exc()
            sys.exit(1)

    return wrapper


def load_settings():
    try:
        return SettingsLoader().load()
    except CubeError as e:
        raise click.ClickException(e.format_message())


def install_completion(ctx: click.Context, param, value: bool) -> None:
    """Eager -i callback: install completion and exit."""
    if not value or ctx.resilient_parsing:
        return
    CompletionCommand(ctx.find_root().command, load_settings()).run()
    ctx.exit(0)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-h",
    "--host",
    "hosts",
    multiple=True,
    metavar="HOST",
    shell_complete=complete_hosts,
    help="Target host; repeatable. A '*' makes HOST a pattern matched against "
    "SSH config, known_hosts and /etc/hosts names.",
)
@click.option(
    "-c",
    "--cube",
    "cubes",
    multiple=True,
    metavar="CUBE",
    help="Cube to run (script, script without .sh, or directory); repeatable.",
)
@click.option("-u", "--user", metavar="USER", help="SSH user. Defaults to $USER.")
@click.option(
    "-e",
    "--envar",
    "envars",
    multiple=True,
    metavar="ENVAR",
    help="ENVAR script sourced before cubes; repeatable. *.enc files are "
    "decrypted temporarily.",
)
@click.option("-p", "--password", metavar="PWD", help="Password for .enc ENVAR files.")
@click.option("-d", "--debug", is_flag=True, help="Print debugging information.")
@click.option("-q", "--quiet", is_flag=True, help="Quiet; minimize output.")
@click.option(
    "-s",
    "--skip-init",
    is_flag=True,
    help="Skip remote host initialization (remote directory, function library).",
)
@click.option("-k", "--keep-exec", is_flag=True, help="Keep the generated cube_exec.sh.")
@click.option(
    "-i",
    "--install-completion",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=install_completion,
    help="Install bash programmable completion for hosts.",
)
@click.version_option(
    __version__,
    "-v",
    "--version",
    prog_name="cubectl",
    message="%(prog)s version %(version)s",
)
@click.argument("commands", nargs=-1, type=click.UNPROCESSED)
def cli(hosts, cubes, user, envars, password, debug, quiet, skip_init, keep_exec, commands):
    """
    Run cubes and commands on one or more hosts over SSH

    A CUBE is a shell script, or a directory containing a script of the same
    name, uploaded to each HOST and sourced from its own directory. ENVAR
    scripts are sourced first, then cubes, then COMMANDs. Without any HOST,
    COMMAND may be a sub-command: show (decrypt and print ENVAR) or edit
    (decrypt, edit and re-encrypt ENVAR).

    \b
    Examples:
      cubectl -h socrates uptime
      cubectl -h socrates -c deploy
      cubectl -u root -h socrates -h seneca uptime
      cubectl -h 'web*.test.com' -e production.sh.enc -c deploy
      cubectl -e production.sh.enc show
      cubectl -e production.sh.enc edit
    """
    settings = load_settings()
    config = RunConfig(
        host_specs=tuple(hosts),
        cubes=tuple(cubes),
        envar_scripts=tuple(Path(envar) for envar in envars),
        commands=tuple(commands),
        user=user or settings.user or get_default_user(),
        password=password,
        debug=debug,
        quiet=quiet,
        skip_init=skip_init,
        keep_exec=keep_exec,
        settings=settings,
    )

    if not config.host_specs and config.sub_command in SUB_COMMANDS:
        SecretsCommand(config).run()
    else:
        RunCommand(config).run()


@handle_cli_errors
def main():
    """Main entry point with error handling."""
    cli()


if __name__ == "__main__":
    main()
