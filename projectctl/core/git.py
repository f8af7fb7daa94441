"""Git operations backed by the `git` executable.

The template cache keeps one full working clone per repository URL under
`<projectctl root>/repositories/<sha256(url)>`. A clone is created once and
afterwards only fetched, so an interrupted clone or fetch is repaired by the
next call. No lock guards the cache: concurrent processes may interleave
fetches.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from projectctl.core.home import ProjectctlHome
from projectctl.lib.errors import (
    GitError,
    InvalidUtf8Error,
    NoDefaultBranchError,
)
from projectctl.lib.paths import ensure_dir_is_created
from projectctl.models import (
    BranchRevision,
    DefaultBranchRevision,
    GitRevision,
    TagRevision,
)

log = logging.getLogger(__name__)

REMOTE = "origin"


def _isolated_env(path: Path) -> dict[str, str]:
    """Environment that stops git from discovering a repository above `path`."""
    env = dict(os.environ)
    env.pop("GIT_DIR", None)
    env.pop("GIT_WORK_TREE", None)
    env["GIT_CEILING_DIRECTORIES"] = str(path.resolve().parent)
    return env


def _git(args: list[str], cwd: Path | None = None, isolate: bool = False) -> bytes:
    """Run a git command and return its raw stdout.

    Raises:
        GitError: If git is missing or the command fails.
    """
    cmd = ["git", *args]
    log.debug(f"Running {' '.join(cmd)} (cwd={cwd})")
    env = _isolated_env(cwd) if isolate and cwd is not None else None
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            env=env,
            capture_output=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(f"`git {' '.join(args)}` failed: {stderr}") from e
    return result.stdout


def _decode(output: bytes) -> str:
    try:
        return output.decode("utf-8").strip()
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error("git output") from e


def clone(url: str, dest: Path) -> None:
    log.debug(f"Cloning {url} into {dest}")
    _git(["clone", "--quiet", url, str(dest)])


def open_repository(path: Path) -> None:
    """Check that `path` is the root of a git working tree."""
    log.debug(f"Opening git repository {path}")
    _git(["rev-parse", "--git-dir"], cwd=path, isolate=True)


def first_local_branch(repo: Path) -> str | None:
    """Return the first local branch as listed by the repository.

    This is the first branch in listing order, which is not necessarily the
    remote's default branch. Callers that need a specific branch must ask
    for it explicitly.
    """
    output = _decode(
        _git(["for-each-ref", "--format=%(refname:short)", "refs/heads/"], cwd=repo)
    )
    branches = [line for line in output.splitlines() if line]
    return branches[0] if branches else None


def revision_ref(repo: Path, url: str, revision: GitRevision) -> str:
    """Map a revision onto the ref to fetch and check out."""
    if isinstance(revision, (BranchRevision, TagRevision)):
        return revision.ref
    if isinstance(revision, DefaultBranchRevision):
        log.debug("Getting default branch")
        branch = first_local_branch(repo)
        if branch is None:
            raise NoDefaultBranchError(url)
        return BranchRevision(name=branch).ref
    raise TypeError(f"unsupported revision: {revision!r}")


def fetch(repo: Path, ref: str) -> None:
    """Fetch a single ref from origin, downloading tags as well."""
    if ref.startswith(f"refs/remotes/{REMOTE}/"):
        branch = ref.removeprefix(f"refs/remotes/{REMOTE}/")
        refspec = f"+refs/heads/{branch}:{ref}"
    else:
        refspec = f"+{ref}:{ref}"
    log.debug(f"Fetching {refspec} from {REMOTE}")
    _git(["fetch", "--quiet", "--tags", "--force", REMOTE, refspec], cwd=repo)


def checkout(repo: Path, ref: str) -> str:
    """Check out the tree of `ref` and detach HEAD onto it. Returns the commit."""
    commit = _decode(_git(["rev-parse", "--verify", f"{ref}^{{commit}}"], cwd=repo))
    log.debug(f"Checking out {ref} ({commit})")
    _git(["checkout", "--quiet", "--force", "--detach", commit], cwd=repo)
    return commit


def checkout_file(
    home: ProjectctlHome, url: str, template: str, revision: GitRevision
) -> Path:
    """Return the local path of `template` at `revision` of the repository `url`."""
    repo = home.repo_path(url)
    if repo.is_dir():
        open_repository(repo)
    else:
        ensure_dir_is_created(home.repositories)
        clone(url, repo)
    ref = revision_ref(repo, url, revision)
    fetch(repo, ref)
    commit = checkout(repo, ref)
    log.info(f"Checked out {url} at {ref} ({commit[:12]})")
    return repo / template


def init_repository(path: Path) -> None:
    log.debug(f"Initializing git repository into {path}")
    _git(["init", "--quiet", str(path)])


def read_origin_url(path: Path) -> str | None:
    """Return the origin remote URL when `path` itself is a git working tree."""
    try:
        return _decode(_git(["remote", "get-url", REMOTE], cwd=path, isolate=True))
    except GitError as e:
        log.debug(f"{path} doesn't appear to be a repository with an origin: {e}")
        return None


def load_git_config(path: Path) -> dict[str, str]:
    """Read the git configuration visible from `path`.

    When `path` is a repository its local configuration is included,
    otherwise only the global and system configurations are read. Dots in
    entry names are replaced by underscores (`user.name` -> `user_name`).
    """
    try:
        output = _git(["config", "--list", "-z"], cwd=path, isolate=True)
    except GitError as e:
        log.warning(f"Unable to read git configuration: {e}")
        return {}

    config: dict[str, str] = {}
    for raw in output.split(b"\0"):
        if not raw:
            continue
        try:
            entry = raw.decode("utf-8")
        except UnicodeDecodeError:
            log.warning("Failed to read git configuration entry, it will be ignored")
            continue
        name, _, value = entry.partition("\n")
        config[name.replace(".", "_")] = value
    return config
