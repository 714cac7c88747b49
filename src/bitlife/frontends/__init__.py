"""Frontend interfaces for the bitlife engine."""

from .cli import CLIGameOfLife

__all__ = ["CLIGameOfLife"]
