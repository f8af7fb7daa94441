import pytest
from pydantic import ValidationError

from projectctl.models import (
    BranchRevision,
    DefaultBranchRevision,
    GitSource,
    LocalSource,
    Project,
    ProjectMetadata,
    RenderCommand,
    RenderedEntry,
    TagRevision,
    TemplateKind,
    UrlSource,
)


def test_metadata_serializes_repository_alias():
    metadata = ProjectMetadata(name="demo", repository_url="https://example.com/x.git")
    assert metadata.model_dump(by_alias=True) == {
        "name": "demo",
        "description": None,
        "repository": "https://example.com/x.git",
    }
    assert ProjectMetadata.model_validate({"name": "demo", "repository": "u"}).repository_url == "u"


def test_revision_refs():
    assert BranchRevision(name="dev").ref == "refs/remotes/origin/dev"
    assert TagRevision(name="v1").ref == "refs/tags/v1"


def test_git_source_defaults_to_default_branch():
    source = GitSource(url="https://example.com/t.git", template="a/b.j2")
    assert isinstance(source.revision, DefaultBranchRevision)


def test_entry_template_is_discriminated_on_kind():
    entry = RenderedEntry.model_validate(
        {
            "file": {"checksum": "abc", "vars": {"x": 1}},
            "template": {
                "kind": "git",
                "url": "u",
                "template": "t.j2",
                "revision": {"kind": "tag", "name": "v1"},
            },
        }
    )
    assert isinstance(entry.template, GitSource)
    assert entry.template.revision == TagRevision(name="v1")

    entry = RenderedEntry.model_validate(
        {"file": {"checksum": "abc"}, "template": {"kind": "url", "url": "https://x"}}
    )
    assert isinstance(entry.template, UrlSource)
    assert entry.file.vars is None


@pytest.mark.parametrize("path", ["/etc/passwd", "../outside.j2", "a/../../b"])
def test_git_template_must_stay_in_repository(path):
    with pytest.raises(ValidationError):
        GitSource(url="u", template=path)


def test_local_source_rejects_absolute_path():
    with pytest.raises(ValidationError):
        LocalSource(path="/etc/passwd")


@pytest.mark.parametrize("path", ["../outside.j2", "t/../a.j2"])
def test_local_source_leaves_parent_components_to_resolution(path):
    assert LocalSource(path=path).path == path


def test_project_rejects_absolute_keys(tmp_path):
    entry = {"file": {"checksum": "c"}, "template": {"kind": "local", "path": "t.j2"}}
    with pytest.raises(ValidationError):
        Project.model_validate(
            {"metadata": {"name": "p"}, "root_path": tmp_path, "rendered": {"/x": entry}}
        )


def test_project_root_path_is_not_serialized(tmp_path):
    project = Project(metadata=ProjectMetadata(name="p"), root_path=tmp_path)
    assert "root_path" not in project.model_dump()


class TestRenderCommand:
    def test_tag_wins_over_branch(self):
        cmd = RenderCommand(
            dest="out", kind=TemplateKind.GIT, url="u", git_branch="dev", git_tag="v1"
        )
        assert cmd.revision == TagRevision(name="v1")

    def test_branch_and_default(self):
        cmd = RenderCommand(dest="out", kind=TemplateKind.GIT, url="u", git_branch="dev")
        assert cmd.revision == BranchRevision(name="dev")
        cmd = RenderCommand(dest="out", kind=TemplateKind.GIT, url="u")
        assert cmd.revision == DefaultBranchRevision()

    def test_url_required_for_remote_kinds(self):
        with pytest.raises(ValidationError):
            RenderCommand(dest="out", kind=TemplateKind.URL)
        with pytest.raises(ValidationError):
            RenderCommand(dest="out", kind=TemplateKind.GIT)
        RenderCommand(dest="out", kind=TemplateKind.LOCAL)
