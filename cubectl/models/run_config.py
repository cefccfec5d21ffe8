"""
Run Configuration Model

Immutable value built once from the command line and passed explicitly to
every pipeline component.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from cubectl.config import Settings


@dataclass(frozen=True)
class RunConfig:
    """Run-wide configuration accumulated from repeated flags."""

    host_specs: Tuple[str, ...] = ()
    cubes: Tuple[str, ...] = ()
    envar_scripts: Tuple[Path, ...] = ()
    commands: Tuple[str, ...] = ()
    user: str = ""
    password: Optional[str] = field(default=None, repr=False)
    debug: bool = False
    quiet: bool = False
    skip_init: bool = False
    keep_exec: bool = False
    settings: Settings = field(default_factory=Settings)

    @property
    def inline_commands(self) -> str:
        """Trailing arguments joined into the inline command text."""
        return " ".join(self.commands)

    @property
    def remote_dir(self) -> str:
        return self.settings.remote_dir

    @property
    def sub_command(self) -> Optional[str]:
        """First trailing argument, used as a sub-command when no hosts are given."""
        return self.commands[0] if self.commands else None
