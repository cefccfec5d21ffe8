"""
cubectl Services Layer

Wrappers around the external tools the pipeline drives: ssh, rsync and gpg.
"""

from .gpg_service import GPGService
from .ssh_service import SSHService

__all__ = [
    "GPGService",
    "SSHService",
]
