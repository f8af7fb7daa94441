"""CLI commands"""

from .new import new_command
from .render import render_command
from .update import update_command

__all__ = ["new_command", "render_command", "update_command"]
