"""cubectl commands."""

from .completion import CompletionCommand, complete_hosts
from .run import RunCommand
from .secrets import SecretsCommand

__all__ = [
    "CompletionCommand",
    "RunCommand",
    "SecretsCommand",
    "complete_hosts",
]
