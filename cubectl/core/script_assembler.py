"""
Composite Script Assembly

Builds the single remote script run on every host: the function library
bootstrap, ENVAR sourcing, cube sourcing and inline commands, always in that
order.
"""

from pathlib import Path
from typing import List, Sequence

from cubectl.constants import (
    COMPOSITE_SCRIPT_PERMISSIONS,
    INITIAL_DIRECTORY_VAR,
    REMOTE_LIBRARY_NAME,
)
from cubectl.models.artifacts import Cube, EnvarScript
from cubectl.models.script import CompositeScript, ScriptStep, StepKind
from cubectl.utils import remote_path

CHECK = "|| cube_check_return"
RESTORE = f'cd "${{{INITIAL_DIRECTORY_VAR}}}"'


class ScriptAssembler:
    """Assembles and renders the composite script for one remote directory."""

    def __init__(self, remote_dir: str):
        """
        Initialize assembler.

        Args:
            remote_dir: Remote base directory holding every upload
        """
        self.remote_dir = remote_dir.rstrip("/")

    @property
    def library_path(self) -> str:
        return remote_path(self.remote_dir, REMOTE_LIBRARY_NAME)

    def build_steps(
        self,
        envars: Sequence[EnvarScript],
        cubes: Sequence[Cube],
        inline_commands: str = "",
    ) -> List[ScriptStep]:
        """
        Build the ordered step list: all ENVARs, then all cubes, then inline.

        Args:
            envars: ENVAR scripts in input order
            cubes: Classified cubes in input order
            inline_commands: Raw command text, may be empty

        Returns:
            Ordered list of ScriptStep
        """
        steps = [
            ScriptStep(
                kind=StepKind.ENV,
                identifier=envar.name,
                remote_path=envar.remote_script(self.remote_dir),
                workdir=remote_path(self.remote_dir),
                remove_after=envar.decrypted,
            )
            for envar in envars
        ]
        steps += [
            ScriptStep(
                kind=StepKind.CUBE,
                identifier=cube.name,
                remote_path=cube.remote_script(self.remote_dir),
                workdir=cube.remote_workdir(self.remote_dir),
            )
            for cube in cubes
        ]
        if inline_commands:
            steps.append(
                ScriptStep(kind=StepKind.INLINE, identifier="inline", text=inline_commands)
            )
        return steps

    def render(self, steps: Sequence[ScriptStep]) -> str:
        """Render steps into script text (no timestamps, byte-stable)."""
        lines = [
            "#!/bin/sh",
            f". {self.library_path}",
            "if [ $? -ne 0 ] ; then",
            f'  echo "Could not source {self.library_path} script" 1>&2',
            "  exit 1",
            "fi",
            f"{INITIAL_DIRECTORY_VAR}=${{PWD}}",
        ]
        for step in steps:
            lines.extend(self._render_step(step))
        return "\n".join(lines) + "\n"

    def _render_step(self, step: ScriptStep) -> List[str]:
        if step.kind == StepKind.INLINE:
            return [RESTORE, step.text]

        lines = [
            f"cd {step.workdir}/ {CHECK}",
            f". {step.remote_path} {CHECK}",
        ]
        if step.kind == StepKind.ENV:
            if step.remove_after:
                lines.append(f"rm -f {step.remote_path} {CHECK}")
        else:
            lines.append(RESTORE)
        return lines

    def assemble(
        self,
        envars: Sequence[EnvarScript],
        cubes: Sequence[Cube],
        inline_commands: str = "",
    ) -> CompositeScript:
        """Build steps and render them into a CompositeScript."""
        steps = self.build_steps(envars, cubes, inline_commands)
        return CompositeScript(steps=tuple(steps), text=self.render(steps))

    def write(self, script: CompositeScript, path: Path) -> Path:
        """Write the script locally and make it executable."""
        path = Path(path)
        path.write_text(script.text)
        path.chmod(COMPOSITE_SCRIPT_PERMISSIONS)
        return path
