"""
Secrets Commands

Standalone show/edit operations on a single encrypted ENVAR script.
No hosts are contacted.
"""

from cubectl.base import BaseCommand
from cubectl.core import ArtifactPlanner, SecretManager
from cubectl.constants import ENCRYPTED_SUFFIX
from cubectl.exceptions import CubeUsageError, NotEncryptedError
from cubectl.models import RunConfig
from cubectl.services import GPGService
from cubectl.ui_components import print_progress


class SecretsCommand(BaseCommand):
    """Decrypt and print (show) or decrypt, edit and re-encrypt (edit)."""

    def __init__(self, config: RunConfig, gpg_service: GPGService = None):
        super().__init__(debug=config.debug, quiet=config.quiet)
        self.config = config
        self.gpg_service = gpg_service or GPGService(
            config.settings.gpg_binary, on_command=self.print_command
        )

    def execute(self) -> None:
        sub_command = self.config.sub_command
        envars = self.config.envar_scripts
        if not envars:
            raise CubeUsageError(f"{sub_command} sub-COMMAND without -e ENVAR file.")
        if len(envars) > 1:
            raise CubeUsageError(f"{sub_command} sub-COMMAND takes a single -e ENVAR file.")

        path = ArtifactPlanner().validate_envars(envars)[0]
        if not SecretManager.is_encrypted(path):
            raise NotEncryptedError(str(path), ENCRYPTED_SUFFIX)

        manager = SecretManager(
            self.gpg_service, self.config.password, notify=print_progress
        )
        if sub_command == "show":
            contents = manager.show(path)
            print_progress(f"Contents of {path}:")
            self.console.out(contents, end="", highlight=False)
        elif sub_command == "edit":
            manager.edit(path, editor=self.config.settings.editor)
            self.print_success(f"Re-encrypted {path}")
        else:
            raise CubeUsageError(f"Unknown sub-COMMAND {sub_command}")
