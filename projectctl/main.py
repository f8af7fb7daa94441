"""projectctl CLI Main Entry Point

projectctl - render files from templates and keep them up to date.

Usage:
    projectctl render DEST --git URL -t PATH     # Render a template from a git repository
    projectctl render DEST --url URL             # Render a template downloaded over HTTP(S)
    projectctl render DEST --local -t PATH       # Render a template of the project
    projectctl update                            # Re-render every managed file
    projectctl new NAME --git URL -t PATH        # Create a project from a template directory
    projectctl --version                         # Show version
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from ._version import __version__
from .commands import new_command, render_command, update_command
from .commands.utils import setup_logging
from .core.home import ROOT_DIR_ENV
from .lib.context import CLIContext

PROJECT_DIR_ENV = "PROJECTCTL_PROJECT_DIR"

typer_app = typer.Typer(no_args_is_help=True, add_completion=False)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"projectctl {__version__}")
        raise typer.Exit()


@typer_app.callback()
def cli(
    ctx: typer.Context,
    project_dir: Path = typer.Option(
        Path("."),
        "--project-dir",
        envvar=PROJECT_DIR_ENV,
        help="Project root directory.",
    ),
    projectctl_dir: Optional[Path] = typer.Option(
        None,
        "--projectctl-dir",
        envvar=ROOT_DIR_ENV,
        help="projectctl root directory holding the template cache "
        "(default: ~/.projectctl).",
    ),
    verbose: int = typer.Option(
        0, "-v", "--verbose", count=True, help="Increase verbosity (-v, -vv)."
    ),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only show errors."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colors."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Render files from templates and keep them up to date.

    \b
    Templates are Jinja2 files fetched from a git repository, an HTTP(S) URL
    or the project itself. They see `env`, `git`, `project` and `var`.
    """
    setup_logging(verbose, quiet, no_color)
    cwd = Path.cwd()
    ctx.obj = CLIContext(
        cwd=cwd,
        project_dir=cwd / project_dir.expanduser(),
        projectctl_dir=projectctl_dir,
    )


@typer_app.command()
def render(
    ctx: typer.Context,
    dest: Path = typer.Argument(..., help="Destination file."),
    git: Optional[str] = typer.Option(
        None, "--git", help="URL of the git repository holding the template."
    ),
    url: Optional[str] = typer.Option(
        None, "--url", help="HTTP(S) URL of the template."
    ),
    local: bool = typer.Option(
        False, "--local", help="Use a template of the project directory."
    ),
    template: Optional[Path] = typer.Option(
        None,
        "-t",
        "--template",
        help="Template path, inside the repository with --git or the project with --local.",
    ),
    git_branch: Optional[str] = typer.Option(
        None, "--git-branch", help="Branch to use with --git."
    ),
    git_tag: Optional[str] = typer.Option(
        None, "--git-tag", help="Tag to use with --git."
    ),
    vars_json: Optional[str] = typer.Option(
        None, "--vars", help="Template variables as JSON."
    ),
    vars_file: Optional[Path] = typer.Option(
        None, "--vars-file", help="Template variables from a YAML or JSON file."
    ),
    force: bool = typer.Option(
        False, "-f", "--force", help="Overwrite an existing destination."
    ),
) -> None:
    """Render a template into DEST and record it in the project.

    \b
    Examples:
        projectctl render .editorconfig --git https://host/templates.git -t editorconfig.j2
        projectctl render LICENSE --url https://host/LICENSE.j2 --vars '{"year": 2024}'
        projectctl render README.md --local -t templates/README.md.j2
    """
    render_command(
        ctx.obj,
        dest,
        git=git,
        url=url,
        local=local,
        template=template,
        git_branch=git_branch,
        git_tag=git_tag,
        vars_json=vars_json,
        vars_file=vars_file,
        force=force,
    )


@typer_app.command()
def update(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "-f", "--force", help="Also overwrite files modified since rendering."
    ),
) -> None:
    """Re-render every file rendered in the project."""
    update_command(ctx.obj, force=force)


@typer_app.command()
def new(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Project name."),
    dest: Optional[Path] = typer.Argument(
        None, help="Project directory (default: ./NAME)."
    ),
    git: str = typer.Option(
        ..., "--git", help="URL of the git repository holding the template."
    ),
    template: str = typer.Option(
        ..., "-t", "--template", help="Template directory inside the repository."
    ),
    git_branch: Optional[str] = typer.Option(None, "--git-branch", help="Branch to use."),
    git_tag: Optional[str] = typer.Option(None, "--git-tag", help="Tag to use."),
    description: Optional[str] = typer.Option(
        None, "-d", "--description", help="Project description."
    ),
    vars_json: Optional[str] = typer.Option(
        None, "--vars", help="Template variables as JSON."
    ),
    vars_file: Optional[Path] = typer.Option(
        None, "--vars-file", help="Template variables from a YAML or JSON file."
    ),
    skip_git_init: bool = typer.Option(
        False, "--skip-git-init", help="Don't initialize a git repository."
    ),
) -> None:
    """Create project NAME from a template directory of a git repository."""
    new_command(
        ctx.obj,
        name,
        dest,
        git=git,
        template=template,
        git_branch=git_branch,
        git_tag=git_tag,
        description=description,
        vars_json=vars_json,
        vars_file=vars_file,
        skip_git_init=skip_git_init,
    )


def app(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    typer_app(args=argv)


if __name__ == "__main__":
    app()
