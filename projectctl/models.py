"""Data model: project state, template sources and commands.

The project state is persisted as `.projectctl/project.json`:

    {
      "metadata": {"name": "...", "description": null, "repository": null},
      "rendered": {
        "<relative-dest-path>": {
          "file": {"checksum": "<sha256>", "vars": ...},
          "template": {"kind": "git|local|url", ...}
        }
      }
    }
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# Project metadata
# =============================================================================


class ProjectMetadata(BaseModel):
    """Metadata derived once from the project directory."""

    model_config = {"populate_by_name": True}

    name: str = Field(description="Project name")
    description: str | None = Field(default=None, description="Project description")
    repository_url: str | None = Field(
        default=None, alias="repository", description="Origin remote URL"
    )


# =============================================================================
# Git revisions - discriminated union on `kind`
# =============================================================================


class BranchRevision(BaseModel):
    kind: Literal["branch"] = "branch"
    name: str

    @property
    def ref(self) -> str:
        return f"refs/remotes/origin/{self.name}"


class TagRevision(BaseModel):
    kind: Literal["tag"] = "tag"
    name: str

    @property
    def ref(self) -> str:
        return f"refs/tags/{self.name}"


class DefaultBranchRevision(BaseModel):
    """The first local branch of the cached clone."""

    kind: Literal["default-branch"] = "default-branch"


GitRevision = Annotated[
    Union[BranchRevision, TagRevision, DefaultBranchRevision],
    Field(discriminator="kind"),
]


# =============================================================================
# Template sources - discriminated union on `kind`
# =============================================================================


def _check_relative(value: str) -> str:
    if PurePosixPath(value).is_absolute():
        raise ValueError(f"path must be relative: {value}")
    return value


def _check_no_parent(value: str) -> str:
    if ".." in PurePosixPath(_check_relative(value)).parts:
        raise ValueError(f"path must not contain '..': {value}")
    return value


class GitSource(BaseModel):
    """Template file stored in a git repository."""

    kind: Literal["git"] = "git"
    url: str
    template: str = Field(description="Path of the template inside the repository")
    revision: GitRevision = Field(default_factory=DefaultBranchRevision)

    @field_validator("template")
    @classmethod
    def check_template(cls, value: str) -> str:
        return _check_no_parent(value)


class UrlSource(BaseModel):
    """Template file downloaded over HTTP(S)."""

    kind: Literal["url"] = "url"
    url: str


class LocalSource(BaseModel):
    """Template file stored inside the project directory."""

    kind: Literal["local"] = "local"
    path: str = Field(description="Path of the template relative to the project root")

    @field_validator("path")
    @classmethod
    def check_path(cls, value: str) -> str:
        return _check_relative(value)


TemplateSource = Annotated[
    Union[GitSource, UrlSource, LocalSource],
    Field(discriminator="kind"),
]


# =============================================================================
# Rendered files and project state
# =============================================================================


class RenderedFile(BaseModel):
    """Checksum of the rendered output and the variables that produced it."""

    checksum: str
    vars: Any = None


class RenderedEntry(BaseModel):
    file: RenderedFile
    template: TemplateSource


class Project(BaseModel):
    """Project state, loaded fresh for every command."""

    metadata: ProjectMetadata
    root_path: Path = Field(exclude=True, description="Absolute project root")
    rendered: dict[str, RenderedEntry] = Field(
        default_factory=dict, description="Rendered entries keyed by relative path"
    )

    @field_validator("rendered")
    @classmethod
    def check_relative_keys(
        cls, value: dict[str, RenderedEntry]
    ) -> dict[str, RenderedEntry]:
        for key in value:
            _check_relative(key)
        return value


class RenderContext(BaseModel):
    """Values exposed to templates besides the caller's variables."""

    env: dict[str, str] = Field(default_factory=dict)
    git: dict[str, str] = Field(default_factory=dict)
    project: ProjectMetadata

    def template_values(self, variables: Any) -> dict[str, Any]:
        """Build the render-time object: `env`, `git`, `project` and `var`."""
        return {
            "env": self.env,
            "git": self.git,
            "project": self.project.model_dump(by_alias=True),
            "var": variables,
        }


# =============================================================================
# Commands
# =============================================================================


class TemplateKind(str, Enum):
    GIT = "git"
    URL = "url"
    LOCAL = "local"


def _revision(branch: str | None, tag: str | None) -> GitRevision:
    if tag is not None:
        return TagRevision(name=tag)
    if branch is not None:
        return BranchRevision(name=branch)
    return DefaultBranchRevision()


class RenderCommand(BaseModel):
    """Render a template into a destination file."""

    dest: Path
    force: bool = False
    kind: TemplateKind
    url: str | None = None
    template: Path | None = None
    git_branch: str | None = None
    git_tag: str | None = None
    vars: Any = None

    @model_validator(mode="after")
    def check_url(self) -> "RenderCommand":
        if self.kind != TemplateKind.LOCAL and not self.url:
            raise ValueError(f"a URL is required for {self.kind.value} templates")
        return self

    @property
    def revision(self) -> GitRevision:
        return _revision(self.git_branch, self.git_tag)


class UpdateCommand(BaseModel):
    """Re-render every managed file."""

    force: bool = False


class NewCommand(BaseModel):
    """Create a new project from a template directory of a git repository."""

    name: str
    dest: Path | None = None
    description: str | None = None
    url: str
    template: str
    git_branch: str | None = None
    git_tag: str | None = None
    vars: Any = None
    skip_git_init: bool = False

    @property
    def revision(self) -> GitRevision:
        return _revision(self.git_branch, self.git_tag)


Command = Union[RenderCommand, UpdateCommand, NewCommand]
