"""Command services"""

from __future__ import annotations

from typing import Any

from projectctl.lib.context import CLIContext
from projectctl.models import Command, NewCommand, RenderCommand, UpdateCommand

from .render import RenderService, UpdateReport
from .scaffold import ScaffoldService


def run_command(ctx: CLIContext, cmd: Command) -> Any:
    """Dispatch a parsed command to its service."""
    if isinstance(cmd, RenderCommand):
        return RenderService(ctx).render(cmd)
    if isinstance(cmd, UpdateCommand):
        return RenderService(ctx).update(cmd.force)
    if isinstance(cmd, NewCommand):
        return ScaffoldService(ctx).new(cmd)
    raise TypeError(f"unsupported command: {cmd!r}")


__all__ = ["RenderService", "ScaffoldService", "UpdateReport", "run_command"]
