from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from cubectl.config import Settings
from cubectl.logger import RunLogger
from cubectl.models import ExecutionResult, SSHResult
from cubectl.services import GPGService, SSHService


class FakeSSHService(SSHService):
    """Records every call; return codes are looked up per (host, kind)."""

    def __init__(self, returncodes: Optional[Dict[Tuple[str, str], int]] = None):
        super().__init__("tester")
        self.returncodes = returncodes or {}
        self.calls: List[Tuple[str, str, object]] = []

    def execute_command(self, host, command, on_output=None):
        kind = "bootstrap" if "mkdir" in command else "execute"
        self.calls.append((kind, host, command))
        code = self.returncodes.get((host, kind), 0)
        if on_output:
            on_output(f"{kind} on {host}")
        return SSHResult(returncode=code, output=f"{kind} on {host}", host=host, command=command)

    def transfer(self, host, sources, destination, on_output=None):
        self.calls.append(("transfer", host, (list(sources), destination)))
        code = self.returncodes.get((host, "transfer"), 0)
        return SSHResult(returncode=code, host=host, command="rsync")

    def calls_of(self, kind: str) -> List[str]:
        return [host for call_kind, host, _ in self.calls if call_kind == kind]


class FakeGPGService(GPGService):
    """'Encrypts' by prefixing a marker and checking the passphrase."""

    MARKER = "FAKEGPG:"

    def __init__(self, passphrase: str = "secret", available: bool = True):
        super().__init__("fake-gpg")
        self.expected = passphrase
        self.available = available
        self.calls: List[Tuple[str, Path, Path]] = []

    def is_available(self) -> bool:
        return self.available

    def decrypt(self, source, output, passphrase=None):
        self.calls.append(("decrypt", Path(source), Path(output)))
        data = Path(source).read_text()
        if passphrase != self.expected or not data.startswith(f"{self.MARKER}{self.expected}:"):
            return ExecutionResult(returncode=2, stderr="decryption failed: Bad session key")
        Path(output).write_text(data[len(f"{self.MARKER}{self.expected}:"):])
        return ExecutionResult(returncode=0)

    def encrypt(self, source, output, passphrase=None):
        self.calls.append(("encrypt", Path(source), Path(output)))
        Path(output).write_text(f"{self.MARKER}{passphrase}:" + Path(source).read_text())
        return ExecutionResult(returncode=0)

    @classmethod
    def write_encrypted(cls, path: Path, plaintext: str, passphrase: str = "secret") -> Path:
        path.write_text(f"{cls.MARKER}{passphrase}:{plaintext}")
        return path


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(log_dir=str(tmp_path / "logs"))


@pytest.fixture
def logger(tmp_path: Path):
    run_logger = RunLogger(tmp_path / "logs", operation="test")
    yield run_logger
    run_logger.close()


@pytest.fixture
def fake_ssh() -> FakeSSHService:
    return FakeSSHService()


@pytest.fixture
def fake_gpg() -> FakeGPGService:
    return FakeGPGService()


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch):
    """Point the settings loader at a file inside tmp_path."""
    config_path = tmp_path / "cubectl.yml"
    config_path.write_text(f"log_dir: {tmp_path / 'logs'}\n")
    monkeypatch.setenv("CUBECTL_CONFIG", str(config_path))
    return config_path


@pytest.fixture
def ssh_factory():
    """Build a FakeSSHService with per-(host, step) return codes."""
    return FakeSSHService


@pytest.fixture
def gpg_factory():
    """Build a FakeGPGService with a chosen passphrase or availability."""
    return FakeGPGService
