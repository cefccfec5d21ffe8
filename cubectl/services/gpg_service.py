"""GPG service for symmetric encryption of ENVAR scripts."""

import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from cubectl.constants import DEFAULT_GPG_BINARY, GPG_SYMMETRIC_OPTIONS
from cubectl.models.results import ExecutionResult

# Passphrase is fed on stdin; the agent must neither prompt nor cache it
_BATCH_OPTIONS = [
    "--batch",
    "--pinentry-mode",
    "loopback",
    "--no-symkey-cache",
    "--passphrase-fd",
    "0",
]


class GPGService:
    """Thin wrapper around the gpg binary."""

    def __init__(
        self,
        binary: str = DEFAULT_GPG_BINARY,
        on_command: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize GPG service.

        Args:
            binary: gpg executable name or path
            on_command: Called with each command line (never the passphrase)
        """
        self.binary = binary
        self.on_command = on_command

    def is_available(self) -> bool:
        """Check if the gpg binary is on the PATH."""
        return shutil.which(self.binary) is not None

    def decrypt(
        self, source: Path, output: Path, passphrase: Optional[str] = None
    ) -> ExecutionResult:
        """
        Decrypt source into output.

        Without a passphrase gpg prompts interactively on the terminal.
        """
        args = ["--yes", "--output", str(output), "--decrypt", str(source)]
        return self._run(args, passphrase)

    def encrypt(
        self, source: Path, output: Path, passphrase: Optional[str] = None
    ) -> ExecutionResult:
        """
        Symmetrically encrypt source into output with the fixed cipher settings.
        """
        args = [
            "--yes",
            *GPG_SYMMETRIC_OPTIONS,
            "--output",
            str(output),
            "--symmetric",
            str(source),
        ]
        return self._run(args, passphrase)

    def _run(self, args: List[str], passphrase: Optional[str]) -> ExecutionResult:
        cmd = [self.binary]
        if passphrase is not None:
            cmd += _BATCH_OPTIONS
        cmd += args

        command_line = shlex.join(cmd)
        if self.on_command:
            self.on_command(command_line)

        try:
            if passphrase is None:
                # Interactive: gpg owns the terminal for its prompt
                result = subprocess.run(cmd)
                return ExecutionResult(returncode=result.returncode, command=command_line)

            result = subprocess.run(
                cmd, input=passphrase + "\n", capture_output=True, text=True
            )
        except OSError as e:
            return ExecutionResult(returncode=127, stderr=str(e), command=command_line)

        return ExecutionResult(
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            command=command_line,
        )
