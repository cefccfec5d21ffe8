"""
cubectl Domain Models

Dataclass-based models for run configuration, artifacts, scripts and results.
"""

from .artifacts import (
    Cube,
    DirectoryCube,
    FileCube,
    ImplicitFileCube,
    EnvarScript,
)
from .results import (
    ExecutionResult,
    HostResult,
    HostStep,
    RunReport,
    SSHResult,
)
from .run_config import RunConfig
from .script import (
    CompositeScript,
    ScriptStep,
    StepKind,
)

__all__ = [
    # Artifacts
    "Cube",
    "DirectoryCube",
    "FileCube",
    "ImplicitFileCube",
    "EnvarScript",
    # Results
    "ExecutionResult",
    "HostResult",
    "HostStep",
    "RunReport",
    "SSHResult",
    # Run
    "RunConfig",
    # Script
    "CompositeScript",
    "ScriptStep",
    "StepKind",
]
