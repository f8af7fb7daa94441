"""Tests for creating a project from a template directory."""

import json

import pytest

from projectctl.lib.errors import (
    DestExistsError,
    TemplateNotFoundError,
    TemplateRenderError,
)
from projectctl.models import NewCommand
from projectctl.services import ScaffoldService

from conftest import requires_git

pytestmark = requires_git


def new_cmd(template_repo, **kwargs):
    values = {
        "name": "myapp",
        "url": str(template_repo),
        "template": "skeleton",
        "description": "My app",
        "vars": {"module": "myapp"},
    }
    values.update(kwargs)
    return NewCommand(**values)


def test_new_project(ctx, project_dir, template_repo):
    project = ScaffoldService(ctx).new(new_cmd(template_repo))

    dest = project_dir / "myapp"
    assert project.root_path == dest.resolve()
    assert (dest / "README.md").read_text() == "# myapp\n\nMy app\n"
    assert (dest / "myapp" / "__init__.py").is_file()
    assert (dest / "LICENSE").read_text() == "MIT {{ not rendered }}\n"
    assert (dest / ".git").is_dir()

    state = json.loads((dest / ".projectctl" / "project.json").read_text())
    assert state == {
        "metadata": {"name": "myapp", "description": "My app", "repository": None},
        "rendered": {},
    }


def test_new_project_in_given_directory(ctx, project_dir, template_repo):
    ScaffoldService(ctx).new(new_cmd(template_repo, dest="nested/app", skip_git_init=True))

    dest = project_dir / "nested" / "app"
    assert (dest / "README.md").is_file()
    assert not (dest / ".git").exists()


def test_existing_destination(ctx, project_dir, template_repo):
    (project_dir / "myapp").mkdir()
    with pytest.raises(DestExistsError):
        ScaffoldService(ctx).new(new_cmd(template_repo))


@pytest.mark.parametrize("template", ["greeting.j2", "missing"])
def test_template_must_be_a_directory(ctx, project_dir, template_repo, template):
    with pytest.raises(TemplateNotFoundError):
        ScaffoldService(ctx).new(new_cmd(template_repo, template=template))
    assert not (project_dir / "myapp").exists()


def test_render_failure_removes_destination(ctx, project_dir, template_repo):
    with pytest.raises(TemplateRenderError):
        ScaffoldService(ctx).new(new_cmd(template_repo, vars={}))
    assert not (project_dir / "myapp").exists()
