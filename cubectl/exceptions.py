"""
cubectl Exception Hierarchy

Pre-flight errors (usage, configuration, resolution, artifacts, secrets) abort
the whole invocation. RemoteError describes a single host's failure and never
stops the other hosts.
"""

from typing import Optional, List


class CubeError(Exception):
    """Base exception for all cubectl errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class CubeUsageError(CubeError):
    """Raised for bad flag or argument combinations."""

    pass


class ConfigurationError(CubeError):
    """Raised when the settings file is invalid."""

    pass


class HostResolutionError(CubeError):
    """Raised when a host specification cannot be resolved."""

    pass


class NoMatchingHostsError(HostResolutionError):
    """Raised when a wildcard host spec matches no harvested host."""

    def __init__(self, spec: str, sources: List[str], candidates: List[str]):
        self.spec = spec
        self.sources = sources
        self.candidates = candidates
        message = f"No known hosts match {spec}"
        context = (
            f"Searched {', '.join(sources)} ({len(candidates)} candidate hosts)"
        )
        super().__init__(message, context)


class ArtifactError(CubeError):
    """Raised when a cube or ENVAR script is missing or malformed."""

    pass


class CubeNotFoundError(ArtifactError):
    """Raised when a cube token matches no directory or script."""

    def __init__(self, cube: str, message: Optional[str] = None):
        self.cube = cube
        if message is None:
            message = (
                f"Cube {cube} could not be found as a directory or script, "
                "or you don't have read permissions."
            )
        super().__init__(message)


class EnvarNotFoundError(ArtifactError):
    """Raised when an ENVAR script is not readable."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Could not find {path} ENVAR script.")


class SecretError(CubeError):
    """Raised when decryption or encryption fails."""

    pass


class NotEncryptedError(SecretError):
    """Raised when an encrypted-only operation gets a plaintext file."""

    def __init__(self, path: str, suffix: str):
        self.path = path
        super().__init__(
            f"Encrypted ENVAR file must end in {suffix} extension.",
            context=f"Got: {path}",
        )


class RemoteError(CubeError):
    """Describes a failed bootstrap, transfer or execution on one host."""

    def __init__(self, host: str, step: str, returncode: int):
        self.host = host
        self.step = step
        self.returncode = returncode
        super().__init__(
            f"Last command failed with return code {returncode}",
            context=f"Host: {host}, Step: {step}",
        )
