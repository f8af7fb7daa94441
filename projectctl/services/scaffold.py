"""New project scaffolding from a template directory of a git repository."""

from __future__ import annotations

import logging
import shutil

from projectctl.core.git import init_repository, load_git_config
from projectctl.core.resolver import TemplateResolver
from projectctl.core.store import save_project
from projectctl.lib.context import CLIContext
from projectctl.lib.errors import (
    DestExistsError,
    GitError,
    ProjectctlError,
    TemplateNotFoundError,
)
from projectctl.lib.paths import canonicalize_path, ensure_dir_is_created
from projectctl.lib.renderer import TemplateRenderer
from projectctl.models import (
    GitSource,
    NewCommand,
    Project,
    ProjectMetadata,
    RenderContext,
)

log = logging.getLogger(__name__)


class ScaffoldService:
    def __init__(
        self, ctx: CLIContext, renderer: TemplateRenderer | None = None
    ) -> None:
        self.ctx = ctx
        self.renderer = renderer or TemplateRenderer()

    def new(self, cmd: NewCommand) -> Project:
        """Create the project directory and its initial state.

        Raises:
            DestExistsError: If the destination already exists.
            TemplateNotFoundError: If the template is not a directory.
        """
        dest = self.ctx.path(cmd.dest) if cmd.dest else self.ctx.cwd / cmd.name
        if dest.exists():
            raise DestExistsError(dest)

        metadata = ProjectMetadata(name=cmd.name, description=cmd.description)
        context = RenderContext(
            env=self.ctx.env, git=load_git_config(self.ctx.cwd), project=metadata
        )
        source = GitSource(url=cmd.url, template=cmd.template, revision=cmd.revision)

        with TemplateResolver(self.ctx.project_dir, self.ctx.home) as resolver:
            template_dir = resolver.resolve(source)
            if not template_dir.is_dir():
                raise TemplateNotFoundError(template_dir)
            ensure_dir_is_created(dest)
            try:
                self.renderer.render_tree(template_dir, dest, cmd.vars, context)
            except ProjectctlError:
                log.debug(f"Removing partially created project {dest}")
                shutil.rmtree(dest, ignore_errors=True)
                raise

        if not cmd.skip_git_init:
            try:
                init_repository(dest)
            except GitError as e:
                log.warning(f"Unable to initialize a git repository in {dest}: {e}")

        project = Project(metadata=metadata, root_path=canonicalize_path(dest))
        save_project(project)
        log.info(f"Created project {cmd.name} in {dest}")
        return project

