"""
Secret Management

Decrypts .enc ENVAR scripts for a run (and removes the plaintext afterwards),
and implements the standalone show/edit operations.
"""

import os
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import click

from cubectl.constants import DECRYPTED_SUFFIX, DEFAULT_EDITOR, ENCRYPTED_SUFFIX
from cubectl.exceptions import NotEncryptedError, SecretError
from cubectl.models.artifacts import EnvarScript
from cubectl.services.gpg_service import GPGService
from cubectl.utils import make_user_executable


class SecretManager:
    """
    Owns every plaintext file it decrypts.

    Plaintext copies are tracked and removed by cleanup(), which callers run
    once at the end of a run whatever its outcome.
    """

    def __init__(
        self,
        gpg: GPGService,
        passphrase: Optional[str] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize secret manager.

        Args:
            gpg: GPG service used for both directions
            passphrase: Passphrase from the command line; None prompts
            notify: Receives user-facing progress messages
        """
        self.gpg = gpg
        self.passphrase = passphrase
        self.notify = notify or (lambda message: None)
        self._transient: List[Path] = []

    @staticmethod
    def is_encrypted(path: Path) -> bool:
        return Path(path).name.endswith(ENCRYPTED_SUFFIX)

    @staticmethod
    def plaintext_path(path: Path) -> Path:
        """production.sh.enc -> production.sh.dec"""
        path = Path(path)
        return path.with_name(path.name[: -len(ENCRYPTED_SUFFIX)] + DECRYPTED_SUFFIX)

    @property
    def transient_files(self) -> List[Path]:
        return list(self._transient)

    def _require_gpg(self) -> None:
        if not self.gpg.is_available():
            raise SecretError(
                f"{self.gpg.binary} program not found on the PATH",
                context="Install GnuPG or set gpg_binary in the settings file",
            )

    def decrypt(self, path: Path) -> Path:
        """
        Decrypt an .enc file into its .dec sibling.

        Returns:
            Path of the plaintext file

        Raises:
            NotEncryptedError: If path lacks the .enc suffix
            SecretError: If gpg is missing or fails
        """
        path = Path(path)
        if not self.is_encrypted(path):
            raise NotEncryptedError(str(path), ENCRYPTED_SUFFIX)
        self._require_gpg()

        output = self.plaintext_path(path)
        if self.passphrase is None:
            self.notify(f"Enter the password for {path}:")
        else:
            self.notify(f"Decrypting {path} ...")

        # Tracked before gpg runs so a partial file is still cleaned up
        self._transient.append(output)
        result = self.gpg.decrypt(path, output, self.passphrase)
        if result.is_failure:
            self._remove(output)
            raise SecretError(
                f"Could not decrypt {path}",
                context=result.stderr.strip() or f"gpg exited with {result.returncode}",
            )
        return output

    def encrypt(self, plaintext: Path, target: Path) -> None:
        """
        Encrypt plaintext over target with the fixed symmetric parameters.

        Raises:
            SecretError: If gpg is missing or fails
        """
        self._require_gpg()
        if self.passphrase is None:
            self.notify(f"Enter the password to re-encrypt {target}:")
        else:
            self.notify(f"Re-encrypting {target} ...")

        result = self.gpg.encrypt(Path(plaintext), Path(target), self.passphrase)
        if result.is_failure:
            raise SecretError(
                f"Could not encrypt {target}",
                context=result.stderr.strip() or f"gpg exited with {result.returncode}",
            )

    def prepare(self, paths: Sequence[Path]) -> List[EnvarScript]:
        """
        Turn ENVAR paths into upload-ready scripts, decrypting .enc files.

        Args:
            paths: ENVAR scripts in input order

        Returns:
            EnvarScript list in the same order
        """
        scripts = []
        for path in paths:
            path = Path(path)
            if self.is_encrypted(path):
                plaintext = self.decrypt(path)
                script = EnvarScript(source=path, path=plaintext, decrypted=True)
            else:
                script = EnvarScript(source=path, path=path)
            make_user_executable(script.path)
            scripts.append(script)
        return scripts

    def show(self, path: Path) -> str:
        """Decrypt path and return its plaintext; no copy is left behind."""
        try:
            plaintext = self.decrypt(path)
            return plaintext.read_text()
        finally:
            self.cleanup()

    def edit(self, path: Path, editor: Optional[str] = None) -> None:
        """
        Decrypt path, open the plaintext in an editor, then re-encrypt it.

        Args:
            path: Encrypted ENVAR script
            editor: Editor command; defaults to $EDITOR, then vi
        """
        try:
            plaintext = self.decrypt(path)
            try:
                click.edit(
                    filename=str(plaintext), editor=editor or _default_editor()
                )
            except click.ClickException as e:
                raise SecretError(f"Editor failed for {plaintext}", context=e.format_message())
            self.encrypt(plaintext, Path(path))
        finally:
            self.cleanup()

    def cleanup(self) -> None:
        """Remove every plaintext file this manager created (best-effort)."""
        while self._transient:
            self._remove(self._transient.pop())

    def _remove(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self.notify(f"Could not remove {path}: {e}")
        if path in self._transient:
            self._transient.remove(path)


def _default_editor() -> str:
    return os.environ.get("EDITOR") or DEFAULT_EDITOR
