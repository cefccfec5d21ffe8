"""
Composite Script Models

The composite script is first built as an ordered list of steps and only
then rendered to text, so ordering can be checked without parsing shell.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class StepKind(Enum):
    """Kind of a composite script step."""

    ENV = "env"
    CUBE = "cube"
    INLINE = "inline"


@dataclass(frozen=True)
class ScriptStep:
    """One sourcing (or inline command) block of the composite script."""

    kind: StepKind
    identifier: str
    remote_path: str = ""
    workdir: str = ""
    remove_after: bool = False
    text: str = ""

    def __repr__(self) -> str:
        return f"ScriptStep(kind={self.kind.value}, identifier={self.identifier})"


@dataclass(frozen=True)
class CompositeScript:
    """Generated remote script: structured steps plus rendered text."""

    steps: Tuple[ScriptStep, ...]
    text: str

    def steps_of(self, kind: StepKind) -> Tuple[ScriptStep, ...]:
        """Get steps of a given kind, in script order."""
        return tuple(step for step in self.steps if step.kind == kind)
