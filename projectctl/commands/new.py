"""New command - create a project from a git template directory"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from projectctl.lib.context import CLIContext
from projectctl.lib.errors import handle_error
from projectctl.models import NewCommand
from projectctl.services import run_command

from .utils import console, parse_vars


def new_command(
    ctx: CLIContext,
    name: str,
    dest: Optional[Path],
    git: str,
    template: str,
    git_branch: Optional[str] = None,
    git_tag: Optional[str] = None,
    description: Optional[str] = None,
    vars_json: Optional[str] = None,
    vars_file: Optional[Path] = None,
    skip_git_init: bool = False,
) -> None:
    """Create project NAME from a template directory."""
    if git_branch and git_tag:
        raise typer.BadParameter("--git-branch and --git-tag are mutually exclusive")

    try:
        cmd = NewCommand(
            name=name,
            dest=dest,
            description=description,
            url=git,
            template=template,
            git_branch=git_branch,
            git_tag=git_tag,
            vars=parse_vars(vars_json, vars_file),
            skip_git_init=skip_git_init,
        )
        project = run_command(ctx, cmd)
        console.print(f"[green]Created project[/green] {name} in {project.root_path}")
    except Exception as e:
        handle_error(e)
