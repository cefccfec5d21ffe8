"""SSH service for executing commands and transferring files to remote hosts."""

import shlex
import subprocess
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from cubectl.constants import RSYNC_BASE_OPTIONS
from cubectl.models.results import SSHResult

OutputCallback = Callable[[str], None]


class SSHService:
    """Service for ssh and rsync operations as a single user."""

    def __init__(
        self,
        user: str,
        ssh_options: Sequence[str] = (),
        rsync_options: Sequence[str] = (),
        on_command: Optional[Callable[[str, str], None]] = None,
    ):
        """
        Initialize SSH service.

        Args:
            user: Remote user for every connection
            ssh_options: Extra arguments placed before user@host
            rsync_options: Extra rsync arguments
            on_command: Called with (host, command line) before each call
        """
        self.user = user
        self.ssh_options = list(ssh_options)
        self.rsync_options = list(rsync_options)
        self.on_command = on_command

    def destination(self, host: str) -> str:
        """Get SSH connection string (user@host)."""
        return f"{self.user}@{host}" if self.user else host

    def build_ssh_command(self, host: str, command: str) -> List[str]:
        """Build full ssh argv for a remote command."""
        return ["ssh", *self.ssh_options, self.destination(host), command]

    def build_transfer_command(
        self, host: str, sources: Sequence[Path], destination: str
    ) -> List[str]:
        """Build full rsync argv copying sources into a remote directory."""
        cmd = ["rsync", *RSYNC_BASE_OPTIONS, *self.rsync_options]
        if self.ssh_options:
            cmd += ["-e", shlex.join(["ssh", *self.ssh_options])]
        cmd += [str(source) for source in sources]
        cmd.append(f"{self.destination(host)}:{destination}")
        return cmd

    def execute_command(
        self, host: str, command: str, on_output: Optional[OutputCallback] = None
    ) -> SSHResult:
        """
        Execute command on remote host via SSH.

        Args:
            host: Host name
            command: Command line run by the remote shell
            on_output: Called with each line of combined output

        Returns:
            SSHResult with execution details
        """
        return self._run(host, self.build_ssh_command(host, command), on_output)

    def transfer(
        self,
        host: str,
        sources: Sequence[Path],
        destination: str,
        on_output: Optional[OutputCallback] = None,
    ) -> SSHResult:
        """
        Copy local paths to a remote directory with rsync, keeping permissions.

        Args:
            host: Host name
            sources: Local files and directories
            destination: Remote directory (e.g. ~/cubectl/)
            on_output: Called with each line of combined output

        Returns:
            SSHResult with transfer details
        """
        cmd = self.build_transfer_command(host, sources, destination)
        return self._run(host, cmd, on_output)

    def _run(
        self, host: str, cmd: List[str], on_output: Optional[OutputCallback]
    ) -> SSHResult:
        """Run argv, streaming combined stdout/stderr line by line."""
        command_line = shlex.join(cmd)
        if self.on_command:
            self.on_command(host, command_line)

        start_time = time.time()
        lines: List[str] = []

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            # Missing ssh/rsync binary is a per-host failure like any other
            message = f"Could not run {cmd[0]}: {e}"
            if on_output:
                on_output(message)
            return SSHResult(
                returncode=127,
                output=message,
                host=host,
                command=command_line,
                duration_seconds=time.time() - start_time,
            )

        with process:
            if process.stdout:
                for line in process.stdout:
                    line = line.rstrip("\n")
                    lines.append(line)
                    if on_output:
                        on_output(line)
            process.wait()

        return SSHResult(
            returncode=process.returncode,
            output="\n".join(lines),
            host=host,
            command=command_line,
            duration_seconds=time.time() - start_time,
        )
