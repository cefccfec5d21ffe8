"""Settings file loading for cubectl"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from cubectl.constants import (
    CONFIG_PATH_ENV,
    DEFAULT_COMPLETION_DIR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_GPG_BINARY,
    DEFAULT_LOG_DIR,
    DEFAULT_REMOTE_DIR,
)
from cubectl.exceptions import ConfigurationError


@dataclass(frozen=True)
class Settings:
    """User settings with built-in defaults"""

    remote_dir: str = DEFAULT_REMOTE_DIR
    user: Optional[str] = None
    ssh_options: Tuple[str, ...] = ()
    rsync_options: Tuple[str, ...] = ()
    log_dir: str = DEFAULT_LOG_DIR
    editor: Optional[str] = None
    gpg_binary: str = DEFAULT_GPG_BINARY
    completion_dir: str = DEFAULT_COMPLETION_DIR

    @property
    def log_dir_expanded(self) -> Path:
        """Get expanded log directory (resolves ~)."""
        return Path(self.log_dir).expanduser()

    @property
    def completion_dir_expanded(self) -> Path:
        return Path(self.completion_dir).expanduser()


_LIST_KEYS = {"ssh_options", "rsync_options"}
_OPTIONAL_KEYS = {"user", "editor"}


class SettingsLoader:
    """Loads ~/.cubectl.yml (or $CUBECTL_CONFIG) into Settings"""

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize settings loader

        Args:
            path: Explicit settings file; defaults to $CUBECTL_CONFIG or
                ~/.cubectl.yml
        """
        if path is None:
            path = Path(
                os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
            ).expanduser()
        self.path = Path(path)

    def load(self) -> Settings:
        """
        Load settings, falling back to defaults when the file is missing

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If the file is unreadable or invalid
        """
        if not self.path.exists():
            return Settings()

        try:
            with open(self.path, "r") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Could not read settings file {self.path}", context=str(e)
            )

        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Invalid settings file {self.path}",
                context="Top level must be a mapping of setting: value",
            )

        return Settings(**self._validate(raw))

    def _validate(self, raw: Dict[str, Any]) -> Dict[str, Any]:
        """Check keys and value types, normalizing lists to tuples"""
        known = {f.name for f in fields(Settings)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown setting(s) in {self.path}: {', '.join(unknown)}",
                context=f"Known settings: {', '.join(sorted(known))}",
            )

        values: Dict[str, Any] = {}
        for key, value in raw.items():
            if key in _LIST_KEYS:
                if not isinstance(value, list) or not all(
                    isinstance(item, str) for item in value
                ):
                    raise ConfigurationError(
                        f"Invalid {key} in {self.path}: expected a list of strings"
                    )
                values[key] = tuple(value)
            elif value is None and key in _OPTIONAL_KEYS:
                values[key] = None
            elif not isinstance(value, str) or not value:
                raise ConfigurationError(
                    f"Invalid {key} in {self.path}: expected a non-empty string"
                )
            else:
                values[key] = value

        if "remote_dir" in values:
            values["remote_dir"] = values["remote_dir"].rstrip("/") or "/"
        return values
