"""CLI commands"""

from .generate import generate_command
from .inspect import inspect_command

__all__ = ["generate_command", "inspect_command"]
