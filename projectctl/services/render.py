"""Render and update commands.

`render` creates a new managed file from a template and records how it was
produced. `update` re-renders every managed file from the same source and
variables, skipping files edited by hand since their last rendering unless
forced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from projectctl.core.git import load_git_config
from projectctl.core.resolver import TemplateResolver
from projectctl.core.store import load_project, save_project
from projectctl.lib.context import CLIContext
from projectctl.lib.digest import hash_file
from projectctl.lib.errors import (
    DestExistsError,
    IoError,
    MissingTemplateError,
    TemplateNotFoundError,
)
from projectctl.lib.paths import ensure_dir_is_created, relative_to_root
from projectctl.lib.renderer import TemplateRenderer
from projectctl.models import (
    GitSource,
    LocalSource,
    Project,
    RenderCommand,
    RenderContext,
    RenderedEntry,
    TemplateKind,
    TemplateSource,
    UrlSource,
)

log = logging.getLogger(__name__)


@dataclass
class UpdateReport:
    """Outcome of an update: re-rendered and skipped relative paths."""

    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class RenderService:
    """Orchestrates template resolution, rendering and project state."""

    def __init__(
        self, ctx: CLIContext, renderer: TemplateRenderer | None = None
    ) -> None:
        self.ctx = ctx
        self.renderer = renderer or TemplateRenderer()

    def _resolver(self) -> TemplateResolver:
        return TemplateResolver(self.ctx.project_dir, self.ctx.home)

    def _render_context(self, project: Project) -> RenderContext:
        return RenderContext(
            env=self.ctx.env,
            git=load_git_config(self.ctx.project_dir),
            project=project.metadata,
        )

    def render(self, cmd: RenderCommand) -> RenderedEntry:
        """Render a template into `cmd.dest` and record it in the project."""
        project = load_project(self.ctx.project_dir)
        context = self._render_context(project)

        dest = self.ctx.path(cmd.dest)
        if not cmd.force and dest.exists():
            raise DestExistsError(dest)
        ensure_dir_is_created(dest.parent)
        # Placeholder stays behind if a later step fails
        log.debug(f"Creating file {dest}")
        try:
            open(dest, "wb").close()
        except OSError as e:
            raise IoError(f"unable to create {dest}: {e}") from e
        dest_rel = relative_to_root(self.ctx.project_dir, dest)

        with self._resolver() as resolver:
            source = self._source(cmd)
            template_path = resolver.resolve(source)
            file = self.renderer.render(template_path, dest, cmd.vars, context)

        entry = RenderedEntry(file=file, template=source)
        project.rendered[dest_rel] = entry
        save_project(project)
        log.info(f"Rendered {dest_rel}")
        return entry

    def _source(self, cmd: RenderCommand) -> TemplateSource:
        if cmd.kind == TemplateKind.GIT:
            if cmd.template is None:
                raise MissingTemplateError()
            return GitSource(
                url=cmd.url, template=cmd.template.as_posix(), revision=cmd.revision
            )
        if cmd.kind == TemplateKind.URL:
            return UrlSource(url=cmd.url)
        if cmd.kind == TemplateKind.LOCAL:
            if cmd.template is None:
                raise MissingTemplateError()
            path = self.ctx.path(cmd.template)
            if not path.exists():
                raise TemplateNotFoundError(path)
            return LocalSource(path=relative_to_root(self.ctx.project_dir, path))
        raise TypeError(f"unsupported template kind: {cmd.kind!r}")

    def update(self, force: bool = False) -> UpdateReport:
        """Re-render every managed file of the project.

        A file whose checksum differs from the recorded one was edited since
        its last rendering; it is left alone unless `force` is set. Any other
        failure aborts the update before the project state is written.
        """
        project = load_project(self.ctx.project_dir)
        context = self._render_context(project)
        root = project.root_path
        rendered = dict(project.rendered)
        report = UpdateReport()

        with self._resolver() as resolver:
            for rel, entry in project.rendered.items():
                dest = root / rel
                relative_to_root(root, dest, strict=False)
                ensure_dir_is_created(dest.parent)
                if not force and dest.exists():
                    if hash_file(dest) != entry.file.checksum:
                        log.warning(
                            f"{rel} changed since last rendering, it will be ignored"
                        )
                        report.skipped.append(rel)
                        continue
                template_path = resolver.resolve(entry.template)
                file = self.renderer.render(
                    template_path, dest, entry.file.vars, context
                )
                rendered[rel] = entry.model_copy(update={"file": file})
                report.updated.append(rel)
                log.info(f"Updated {rel}")

        project.rendered = rendered
        save_project(project)
        return report
