"""
Run Command

Execute cubes and commands on one or more hosts.
"""

from pathlib import Path
from typing import List, Optional

from cubectl import __version__
from cubectl.base import BaseCommand
from cubectl.constants import COMPOSITE_SCRIPT_NAME
from cubectl.core import (
    ArtifactPlanner,
    HostResolver,
    RemoteRunner,
    ScriptAssembler,
    SecretManager,
)
from cubectl.exceptions import CubeUsageError
from cubectl.logger import RunLogger
from cubectl.models import RunConfig, RunReport
from cubectl.services import GPGService, SSHService
from cubectl.ui_components import print_progress
from cubectl.utils import get_library_path


class RunCommand(BaseCommand):
    """
    Run cubes and inline commands on every resolved host.

    Everything that can fail locally (usage, host resolution, missing cubes
    or ENVAR scripts, decryption) fails before any host is contacted.
    Per-host failures are reported inline and do not change the exit code.
    """

    def __init__(
        self,
        config: RunConfig,
        ssh_service: Optional[SSHService] = None,
        gpg_service: Optional[GPGService] = None,
        resolver: Optional[HostResolver] = None,
        script_dir: Optional[Path] = None,
    ):
        """
        Initialize run command.

        Args:
            config: Run configuration built from the command line
            ssh_service: Transport override (defaults to system ssh/rsync)
            gpg_service: Encryption tool override
            resolver: Host resolver override
            script_dir: Where cube_exec.sh is generated (defaults to cwd)
        """
        super().__init__(debug=config.debug, quiet=config.quiet)
        self.config = config
        self.ssh_service = ssh_service
        self.gpg_service = gpg_service or GPGService(
            config.settings.gpg_binary, on_command=self.print_command
        )
        self.resolver = resolver or HostResolver()
        self.planner = ArtifactPlanner()
        self.script_path = Path(script_dir or Path.cwd()) / COMPOSITE_SCRIPT_NAME
        self.report: Optional[RunReport] = None

    def validate(self) -> None:
        """Reject flag combinations that cannot form a run."""
        if not self.config.host_specs:
            if self.config.sub_command:
                raise CubeUsageError(f"Unknown sub-COMMAND {self.config.sub_command}")
            raise CubeUsageError(
                "No hosts specified with -h and no sub-COMMAND specified."
            )
        if not self.config.commands and not self.config.cubes:
            raise CubeUsageError("No COMMANDs or CUBEs specified.")

    def execute(self) -> None:
        """Execute run command."""
        self.validate()

        envar_paths = self.planner.validate_envars(self.config.envar_scripts)
        hosts = self.resolver.resolve_all(self.config.host_specs)
        cubes = self.planner.plan_cubes(self.config.cubes)

        if self.debug:
            print_progress(f"cubectl version {__version__}")

        secrets = SecretManager(
            self.gpg_service, self.config.password, notify=print_progress
        )
        try:
            envars = secrets.prepare(envar_paths)
            self.planner.prepare(cubes)

            assembler = ScriptAssembler(self.config.remote_dir)
            script = assembler.assemble(envars, cubes, self.config.inline_commands)
            assembler.write(script, self.script_path)

            library = None if self.config.skip_init else get_library_path()
            uploads = self.planner.upload_set(self.script_path, cubes, envars, library)

            self.logger = RunLogger(
                self.config.settings.log_dir_expanded,
                operation="run",
                debug=self.debug,
                quiet=self.quiet,
                details={
                    "User": self.config.user,
                    "Hosts": " ".join(hosts),
                    "Cubes": " ".join(cube.name for cube in cubes) or "-",
                    "ENVAR scripts": " ".join(str(e.source) for e in envars) or "-",
                },
            )
            self.logger.log(f"Composite script:\n{script.text}", "DEBUG")

            runner = RemoteRunner(
                self._ssh_service(), self.logger, self.config.remote_dir
            )
            self.report = runner.run(
                hosts, uploads, COMPOSITE_SCRIPT_NAME, skip_init=self.config.skip_init
            )
            self._log_summary(self.report)
        finally:
            secrets.cleanup()
            if not self.config.keep_exec:
                self.script_path.unlink(missing_ok=True)
            if self.logger:
                self.logger.close()

    def _ssh_service(self) -> SSHService:
        if self.ssh_service is not None:
            return self.ssh_service
        return SSHService(
            self.config.user,
            ssh_options=self.config.settings.ssh_options,
            rsync_options=self.config.settings.rsync_options,
            on_command=lambda host, command: self.logger.log_command(command, host=host),
        )

    def _log_summary(self, report: RunReport) -> None:
        failed: List[str] = report.failed_hosts
        if failed:
            self.logger.log(f"Failed hosts: {' '.join(failed)}", "ERROR")
        else:
            self.logger.log(f"All {len(report.hosts)} host(s) succeeded")
        self.print_dim(f"Logs saved to: {self.logger.log_path}")
