"""
Artifact Planning

Classifies cube tokens by probing the filesystem, validates ENVAR scripts
and computes the local upload set.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from cubectl.constants import CUBE_SCRIPT_SUFFIX
from cubectl.exceptions import CubeNotFoundError, EnvarNotFoundError
from cubectl.models.artifacts import (
    Cube,
    DirectoryCube,
    EnvarScript,
    FileCube,
    ImplicitFileCube,
)
from cubectl.utils import is_readable, make_user_executable


class ArtifactPlanner:
    """Validates cubes and ENVAR scripts before anything leaves the machine."""

    def classify(self, token: str) -> Cube:
        """
        Classify a cube token.

        Precedence: directory, then the exact file, then the file with .sh
        appended.

        Raises:
            CubeNotFoundError: If no variant matches, or a directory lacks its
                <name>.sh script
        """
        path = Path(token)

        if path.is_dir():
            cube = DirectoryCube(token=token, path=path)
            if not is_readable(cube.script_path):
                raise CubeNotFoundError(
                    token,
                    f"Could not find {cube.script_name} in cube {token} directory.",
                )
            return cube

        if path.is_file() and is_readable(path):
            return FileCube(token=token, path=path)

        implicit = Path(token + CUBE_SCRIPT_SUFFIX)
        if implicit.is_file() and is_readable(implicit):
            return ImplicitFileCube(token=token, path=implicit)

        raise CubeNotFoundError(token)

    def plan_cubes(self, tokens: Iterable[str]) -> List[Cube]:
        """Classify every token; fails on the first missing cube."""
        return [self.classify(token) for token in tokens]

    def validate_envars(self, paths: Iterable[Path]) -> List[Path]:
        """
        Check that every ENVAR script is readable.

        Raises:
            EnvarNotFoundError: For the first unreadable path
        """
        checked = []
        for path in paths:
            path = Path(path)
            if not path.is_file() or not is_readable(path):
                raise EnvarNotFoundError(str(path))
            checked.append(path)
        return checked

    def prepare(self, cubes: Sequence[Cube]) -> None:
        """Mark cube scripts user-executable ahead of the transfer."""
        for cube in cubes:
            if isinstance(cube, DirectoryCube):
                for member in sorted(cube.path.glob(f"*{CUBE_SCRIPT_SUFFIX}")):
                    make_user_executable(member)
            else:
                make_user_executable(cube.path)

    def upload_set(
        self,
        script_path: Path,
        cubes: Sequence[Cube],
        envars: Sequence[EnvarScript],
        library_path: Optional[Path] = None,
    ) -> List[Path]:
        """
        Local paths copied to every host, in transfer order.

        Args:
            script_path: Generated composite script
            cubes: Classified cubes
            envars: ENVAR scripts (already decrypted)
            library_path: Remote function library; None when skipping init

        Returns:
            List of local paths
        """
        uploads = [script_path]
        uploads.extend(cube.upload_path for cube in cubes)
        if library_path is not None:
            uploads.append(library_path)
        uploads.extend(envar.path for envar in envars)
        return uploads
