"""Rendering and running test commands."""

from snipe.execution.render import CommandRenderer
from snipe.execution.runner import build_argv, edit_commands, run_commands

__all__ = ["CommandRenderer", "build_argv", "edit_commands", "run_commands"]
