"""
cubectl Core

Orchestration pipeline: host resolution, artifact planning, secret handling,
script assembly and remote execution.
"""

from .artifact_planner import ArtifactPlanner
from .host_resolver import HostResolver, HostSource
from .remote_runner import RemoteRunner
from .script_assembler import ScriptAssembler
from .secret_manager import SecretManager

__all__ = [
    "ArtifactPlanner",
    "HostResolver",
    "HostSource",
    "RemoteRunner",
    "ScriptAssembler",
    "SecretManager",
]
