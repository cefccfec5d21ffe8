"""
Remote Execution

Bootstrap, transfer and execute phases across the resolved hosts. Hosts are
processed sequentially, one phase at a time; a host that fails a phase is
reported and skipped in later phases while the other hosts carry on.
"""

from pathlib import Path
from typing import Sequence, Set

from cubectl.exceptions import RemoteError
from cubectl.logger import RunLogger
from cubectl.models.results import HostResult, HostStep, RunReport
from cubectl.services.ssh_service import SSHService


class RemoteRunner:
    """Runs the transfer/execute protocol over a host list."""

    def __init__(self, ssh: SSHService, logger: RunLogger, remote_dir: str):
        """
        Initialize runner.

        Args:
            ssh: Transport for remote commands and transfers
            logger: Run logger (console + log file)
            remote_dir: Remote base directory under the user's home
        """
        self.ssh = ssh
        self.logger = logger
        self.remote_dir = remote_dir.rstrip("/")

    def bootstrap_command(self) -> str:
        """Idempotent creation of the remote base directory."""
        return f"[ -d {self.remote_dir} ] || mkdir -p {self.remote_dir}"

    def execute_command(self, script_name: str) -> str:
        return f". {self.remote_dir}/{script_name}"

    def run(
        self,
        hosts: Sequence[str],
        uploads: Sequence[Path],
        script_name: str,
        skip_init: bool = False,
    ) -> RunReport:
        """
        Run every phase over every host.

        Args:
            hosts: Resolved hosts, in order
            uploads: Local paths copied to each host
            script_name: File name of the composite script inside remote_dir
            skip_init: Skip creating the remote base directory

        Returns:
            RunReport with one result per attempted step
        """
        report = RunReport(hosts=list(hosts))
        failed: Set[str] = set()

        self.logger.progress(f"Preparing hosts: {' '.join(hosts)} ...")

        if not skip_init:
            for host in hosts:
                self._record(report, failed, self.bootstrap(host))

        for host in hosts:
            if host in failed:
                continue
            self._record(report, failed, self.transfer(host, uploads))

        for host in hosts:
            if host in failed:
                continue
            self.logger.progress(f"Executing on {host} ...", host=host)
            self._record(report, failed, self.execute(host, script_name))

        return report

    def bootstrap(self, host: str) -> HostResult:
        result = self.ssh.execute_command(
            host, self.bootstrap_command(), on_output=self._output_for(host)
        )
        return HostResult.from_ssh(HostStep.BOOTSTRAP, result)

    def transfer(self, host: str, uploads: Sequence[Path]) -> HostResult:
        result = self.ssh.transfer(
            host, list(uploads), f"{self.remote_dir}/", on_output=self._output_for(host)
        )
        return HostResult.from_ssh(HostStep.TRANSFER, result)

    def execute(self, host: str, script_name: str) -> HostResult:
        result = self.ssh.execute_command(
            host, self.execute_command(script_name), on_output=self._output_for(host)
        )
        return HostResult.from_ssh(HostStep.EXECUTE, result)

    def _output_for(self, host: str):
        return lambda line: self.logger.log_output(line, host)

    def _record(self, report: RunReport, failed: Set[str], result: HostResult) -> None:
        """Add a result to the report and print it right away."""
        report.add(result)
        if result.is_success:
            self.logger.host_status(
                result.host, f"{result.step.value.capitalize()} succeeded.", ok=True
            )
            return

        failed.add(result.host)
        error = RemoteError(result.host, result.step.value, result.returncode)
        self.logger.host_status(
            result.host, error.message, ok=False, context=error.context
        )

