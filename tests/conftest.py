import shutil
import subprocess
from pathlib import Path

import pytest

from projectctl.lib.context import CLIContext

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

GIT_IDENTITY = [
    "-c",
    "user.name=test",
    "-c",
    "user.email=test@localhost",
    "-c",
    "commit.gpgsign=false",
    "-c",
    "tag.gpgsign=false",
]


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *GIT_IDENTITY, *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def commit_files(repo: Path, files: dict[str, str], message: str = "update") -> str:
    """Write `files` into `repo`, commit them and return the commit id."""
    for rel, content in files.items():
        path = repo / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    git(repo, "add", "--all")
    git(repo, "commit", "--quiet", "-m", message)
    return git(repo, "rev-parse", "HEAD")


def make_repo(path: Path, files: dict[str, str], branch: str = "main") -> Path:
    path.mkdir(parents=True)
    git(path, "init", "--quiet", "-b", branch)
    commit_files(path, files, "initial")
    return path


@pytest.fixture
def project_dir(tmp_path):
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def home_dir(tmp_path):
    return tmp_path / "home"


@pytest.fixture
def ctx(project_dir, home_dir):
    return CLIContext(
        cwd=project_dir,
        project_dir=project_dir,
        projectctl_dir=home_dir,
        env={"USER": "alice"},
    )


@pytest.fixture
def template_repo(tmp_path):
    """Template repository with a `main` branch, a `dev` branch and a `v1` tag.

    main: greeting.j2 -> "Hello {{ var.name }} from main\\n"
    v1:   greeting.j2 -> "Hello {{ var.name }} from v1\\n"
    dev:  greeting.j2 -> "Hello {{ var.name }} from dev\\n"
    """
    repo = make_repo(
        tmp_path / "templates",
        {"greeting.j2": "Hello {{ var.name }} from v1\n"},
    )
    git(repo, "tag", "v1")
    git(repo, "checkout", "--quiet", "-b", "dev")
    commit_files(repo, {"greeting.j2": "Hello {{ var.name }} from dev\n"})
    git(repo, "checkout", "--quiet", "main")
    commit_files(
        repo,
        {
            "greeting.j2": "Hello {{ var.name }} from main\n",
            "skeleton/README.md.j2": "# {{ project.name }}\n\n{{ project.description }}\n",
            "skeleton/{{ var.module }}/__init__.py": "",
            "skeleton/LICENSE": "MIT {{ not rendered }}\n",
        },
    )
    return repo
