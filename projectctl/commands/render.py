"""Render command - render a template into a managed file"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from projectctl.lib.context import CLIContext
from projectctl.lib.errors import handle_error
from projectctl.models import RenderCommand, TemplateKind
from projectctl.services import run_command

from .utils import console, parse_vars


def _template_kind(git: Optional[str], url: Optional[str], local: bool) -> TemplateKind:
    given = [value for value in (git, url, local) if value]
    if len(given) != 1:
        raise typer.BadParameter("exactly one of --git, --url or --local is required")
    if git:
        return TemplateKind.GIT
    if url:
        return TemplateKind.URL
    return TemplateKind.LOCAL


def render_command(
    ctx: CLIContext,
    dest: Path,
    git: Optional[str] = None,
    url: Optional[str] = None,
    local: bool = False,
    template: Optional[Path] = None,
    git_branch: Optional[str] = None,
    git_tag: Optional[str] = None,
    vars_json: Optional[str] = None,
    vars_file: Optional[Path] = None,
    force: bool = False,
) -> None:
    """Render a template into DEST and record it in the project."""
    kind = _template_kind(git, url, local)
    if git_branch and git_tag:
        raise typer.BadParameter("--git-branch and --git-tag are mutually exclusive")

    try:
        cmd = RenderCommand(
            dest=dest,
            force=force,
            kind=kind,
            url=git or url,
            template=template,
            git_branch=git_branch,
            git_tag=git_tag,
            vars=parse_vars(vars_json, vars_file),
        )
        run_command(ctx, cmd)
        console.print(f"[green]Rendered[/green] {dest}")
    except Exception as e:
        handle_error(e)
