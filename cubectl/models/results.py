"""
Result Models

Dataclass models for transport results and per-host outcomes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class HostStep(Enum):
    """Phase of the per-host protocol."""

    BOOTSTRAP = "bootstrap"
    TRANSFER = "transfer"
    EXECUTE = "execute"


@dataclass
class ExecutionResult:
    """Result of a local command execution (gpg, editor, etc.)."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    command: str = ""

    @property
    def is_success(self) -> bool:
        """Check if execution succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if execution failed."""
        return self.returncode != 0

    @property
    def output(self) -> str:
        """Get combined output (stdout + stderr)."""
        return f"{self.stdout}\n{self.stderr}".strip()

    def __repr__(self) -> str:
        return f"ExecutionResult(returncode={self.returncode}, command='{self.command[:50]}...')"


@dataclass
class SSHResult:
    """Result of an ssh or rsync invocation (output is combined)."""

    returncode: int
    output: str = ""
    host: str = ""
    command: str = ""
    duration_seconds: float = 0.0

    @property
    def is_success(self) -> bool:
        """Check if SSH command succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if SSH command failed."""
        return self.returncode != 0

    def __repr__(self) -> str:
        return f"SSHResult(host={self.host}, returncode={self.returncode}, duration={self.duration_seconds:.2f}s)"


@dataclass
class HostResult:
    """Outcome of one protocol step on one host."""

    host: str
    step: HostStep
    returncode: int
    output: str = ""

    @property
    def is_success(self) -> bool:
        return self.returncode == 0

    @classmethod
    def from_ssh(cls, step: HostStep, result: SSHResult) -> "HostResult":
        return cls(
            host=result.host,
            step=step,
            returncode=result.returncode,
            output=result.output,
        )


@dataclass
class RunReport:
    """All host results of one run, in the order they happened."""

    hosts: List[str]
    results: List[HostResult] = field(default_factory=list)

    def add(self, result: HostResult) -> None:
        self.results.append(result)

    @property
    def failed_hosts(self) -> List[str]:
        """Hosts with at least one failed step (in host order)."""
        failed = {r.host for r in self.results if not r.is_success}
        return [host for host in dict.fromkeys(self.hosts) if host in failed]

    @property
    def executed_hosts(self) -> List[str]:
        """Hosts whose composite script ran, successfully or not."""
        return [r.host for r in self.results if r.step == HostStep.EXECUTE]

    @property
    def is_success(self) -> bool:
        return not self.failed_hosts

    def for_host(self, host: str) -> List[HostResult]:
        return [r for r in self.results if r.host == host]

    def __repr__(self) -> str:
        return f"RunReport(hosts={len(self.hosts)}, failed={len(self.failed_hosts)})"
