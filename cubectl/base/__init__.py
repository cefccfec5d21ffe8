"""Base classes for cubectl commands."""

from .base_command import BaseCommand

__all__ = ["BaseCommand"]
