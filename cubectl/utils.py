"""
CLI Utilities

Small helpers shared by the pipeline components.
"""

import getpass
import os
import re
import shlex
import stat
from pathlib import Path

from cubectl.constants import REMOTE_LIBRARY_NAME

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def get_package_root() -> Path:
    """Get the directory of the installed cubectl package."""
    return Path(__file__).resolve().parent


def get_library_path() -> Path:
    """
    Get the local path of the remote shell function library.

    Returns:
        Path to cube_api.sh shipped inside the package
    """
    return get_package_root() / "data" / REMOTE_LIBRARY_NAME


def get_default_user() -> str:
    """Get the invoking user's login name."""
    return os.environ.get("USER") or getpass.getuser()


def remote_path(remote_dir: str, *parts: str) -> str:
    """
    Join a remote base directory with shell-quoted path parts.

    The base directory stays unquoted so that a leading ~ is expanded by the
    remote shell.

    Args:
        remote_dir: Remote base directory (e.g. ~/cubectl)
        *parts: Path components below the base directory

    Returns:
        Shell-ready path string
    """
    base = remote_dir.rstrip("/")
    if not parts:
        return base
    return "/".join([base] + [shlex.quote(part) for part in parts])


def is_readable(path: Path) -> bool:
    """Check that path exists and is readable by the current user."""
    return path.exists() and os.access(path, os.R_OK)


def make_user_executable(path: Path) -> None:
    """Add the user execute bit to path (chmod u+x)."""
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR)


def strip_ansi(text: str) -> str:
    """Remove ANSI color codes from text."""
    return ANSI_ESCAPE.sub("", text)
