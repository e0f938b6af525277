"""CLI commands for vector-surface."""

from vector_surface.cli.commands.demo import demo
from vector_surface.cli.commands.encode import encode

__all__ = ["demo", "encode"]
