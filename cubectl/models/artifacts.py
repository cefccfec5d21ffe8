"""
Artifact Models

Cube variants and ENVAR scripts, classified once and consumed uniformly by
the planner, the script assembler and the runner.
"""

from dataclasses import dataclass
from pathlib import Path

from cubectl.constants import CUBE_SCRIPT_SUFFIX, ENCRYPTED_SUFFIX
from cubectl.utils import remote_path


@dataclass(frozen=True)
class Cube:
    """A packaged unit of remote script logic."""

    token: str
    path: Path

    @property
    def kind(self) -> str:
        raise NotImplementedError

    @property
    def name(self) -> str:
        """Cube identity: basename without the script suffix."""
        name = self.path.name
        if name.endswith(CUBE_SCRIPT_SUFFIX):
            return name[: -len(CUBE_SCRIPT_SUFFIX)]
        return name

    @property
    def upload_path(self) -> Path:
        """Local path handed to the transfer."""
        return self.path

    def remote_workdir(self, remote_dir: str) -> str:
        """Directory entered before sourcing the cube."""
        return remote_path(remote_dir)

    def remote_script(self, remote_dir: str) -> str:
        """Remote script sourced for this cube."""
        return remote_path(remote_dir, self.path.name)


@dataclass(frozen=True)
class DirectoryCube(Cube):
    """Directory uploaded as a whole; runs <dir>/<dir>.sh."""

    @property
    def kind(self) -> str:
        return "directory"

    @property
    def script_name(self) -> str:
        return f"{self.path.name}{CUBE_SCRIPT_SUFFIX}"

    @property
    def script_path(self) -> Path:
        return self.path / self.script_name

    def remote_workdir(self, remote_dir: str) -> str:
        return remote_path(remote_dir, self.path.name)

    def remote_script(self, remote_dir: str) -> str:
        return remote_path(remote_dir, self.path.name, self.script_name)


@dataclass(frozen=True)
class FileCube(Cube):
    """Single script given by its exact path."""

    @property
    def kind(self) -> str:
        return "file"


@dataclass(frozen=True)
class ImplicitFileCube(Cube):
    """Single script given without its .sh suffix."""

    @property
    def kind(self) -> str:
        return "implicit"


@dataclass(frozen=True)
class EnvarScript:
    """
    ENVAR script as it will be uploaded.

    source is the path given on the command line; path is the file that is
    actually uploaded and sourced (the decrypted sibling for .enc files).
    """

    source: Path
    path: Path
    decrypted: bool = False

    @property
    def encrypted(self) -> bool:
        return self.source.name.endswith(ENCRYPTED_SUFFIX)

    @property
    def name(self) -> str:
        return self.path.name

    def remote_script(self, remote_dir: str) -> str:
        return remote_path(remote_dir, self.path.name)
