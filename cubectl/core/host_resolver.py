"""
Host Resolution

Expands host specifications into concrete host names. Wildcard specs are
matched against names harvested from SSH client config files, SSH
known-hosts files and the system hosts file.
"""

import ipaddress
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from cubectl.constants import (
    HOST_WILDCARD,
    HOSTS_FILE,
    SSH_CONFIG_FILES,
    SSH_KNOWN_HOSTS_FILES,
)
from cubectl.exceptions import HostResolutionError, NoMatchingHostsError


def parse_ssh_config(text: str) -> List[str]:
    """
    Harvest names from Host and HostName lines of an ssh_config file.

    Patterns (containing * or ?) and negations are skipped.
    """
    names = []
    for line in text.splitlines():
        parts = line.strip().replace("=", " ", 1).split()
        if len(parts) < 2 or parts[0].lower() not in ("host", "hostname"):
            continue
        for name in parts[1:]:
            if name.startswith("#"):
                break
            if "*" in name or "?" in name or name.startswith("!"):
                continue
            names.append(name)
    return names


def parse_known_hosts(text: str) -> List[str]:
    """
    Harvest the first comma/colon-delimited field of each known_hosts line.

    Comments, [host]:port entries, hashed entries and @markers are skipped.
    """
    names = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line[0] in "#[|@":
            continue
        name = re.split(r"[,:]", line.split()[0], maxsplit=1)[0]
        if name:
            names.append(name)
    return names


def parse_hosts_file(text: str) -> List[str]:
    """Harvest the names following each IP address in an /etc/hosts file."""
    names = []
    for line in text.splitlines():
        fields = line.split("#", 1)[0].split()
        if len(fields) < 2:
            continue
        try:
            ipaddress.ip_address(fields[0])
        except ValueError:
            continue
        names.extend(fields[1:])
    return names


PARSERS: Dict[str, Callable[[str], List[str]]] = {
    "ssh_config": parse_ssh_config,
    "known_hosts": parse_known_hosts,
    "hosts": parse_hosts_file,
}


@dataclass(frozen=True)
class HostSource:
    """A configuration file scanned for host names."""

    path: str
    kind: str

    @property
    def path_expanded(self) -> Path:
        return Path(self.path).expanduser()

    def read_names(self) -> List[str]:
        """Parse the file; unreadable or missing files yield nothing."""
        try:
            text = self.path_expanded.read_text(errors="replace")
        except OSError:
            return []
        return PARSERS[self.kind](text)


DEFAULT_SOURCES = (
    [HostSource(path, "ssh_config") for path in SSH_CONFIG_FILES]
    + [HostSource(path, "known_hosts") for path in SSH_KNOWN_HOSTS_FILES]
    + [HostSource(HOSTS_FILE, "hosts")]
)


class HostResolver:
    """
    Resolves host specs.

    The candidate list is harvested on first wildcard use and cached for the
    lifetime of the resolver (one run).
    """

    def __init__(self, sources: Optional[Sequence[HostSource]] = None):
        self.sources = list(DEFAULT_SOURCES if sources is None else sources)
        self._candidates: Optional[List[str]] = None

    @staticmethod
    def is_wildcard(spec: str) -> bool:
        return HOST_WILDCARD in spec

    @staticmethod
    def pattern_for(spec: str) -> "re.Pattern[str]":
        """
        Translate a wildcard spec into a regular expression.

        Raises:
            HostResolutionError: If the result is not a valid expression
        """
        try:
            return re.compile(spec.replace(HOST_WILDCARD, ".*"))
        except re.error as e:
            raise HostResolutionError(
                f"Invalid host pattern {spec}", context=str(e)
            )

    @property
    def candidates(self) -> List[str]:
        """Harvested host names in source order, without duplicates."""
        if self._candidates is None:
            self._candidates = self.harvest()
        return self._candidates

    def harvest(self) -> List[str]:
        names: Iterable[str] = (
            name for source in self.sources for name in source.read_names()
        )
        return [
            name for name in dict.fromkeys(names) if HOST_WILDCARD not in name
        ]

    def resolve(self, spec: str) -> List[str]:
        """
        Resolve a single host spec.

        Args:
            spec: Literal host name or wildcard pattern

        Returns:
            [spec] for literal names, else matching candidates in harvest order

        Raises:
            NoMatchingHostsError: If a wildcard spec matches nothing
        """
        if not self.is_wildcard(spec):
            return [spec]

        pattern = self.pattern_for(spec)
        matches = [host for host in self.candidates if pattern.fullmatch(host)]
        if not matches:
            raise NoMatchingHostsError(
                spec, [source.path for source in self.sources], self.candidates
            )
        return matches

    def resolve_all(self, specs: Iterable[str]) -> List[str]:
        """Resolve each spec in order and concatenate the results."""
        hosts: List[str] = []
        for spec in specs:
            hosts.extend(self.resolve(spec))
        return hosts
