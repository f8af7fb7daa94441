"""Project state persistence in `<project>/.projectctl/project.json`.

The state file is always rewritten in full from the in-memory project, so
it holds either the previous state or the new one, never a merge of both.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from projectctl.core.git import read_origin_url
from projectctl.lib.errors import InvalidProjectNameError, IoError, JsonError
from projectctl.lib.paths import canonicalize_path, ensure_dir_is_created
from projectctl.models import Project, ProjectMetadata

log = logging.getLogger(__name__)

PROJECTCTL_DIR_NAME = ".projectctl"
PROJECT_FILE_NAME = "project.json"


def project_file_path(root: Path) -> Path:
    """<root>/.projectctl/project.json"""
    return root / PROJECTCTL_DIR_NAME / PROJECT_FILE_NAME


def load_project(root: Path) -> Project:
    """Load the project state of `root`, or synthesize it when absent."""
    root = canonicalize_path(root)
    path = project_file_path(root)
    if path.is_file():
        log.debug(f"Loading project from {path}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise IoError(f"unable to read {path}: {e}") from e
        except ValueError as e:
            raise JsonError(f"unable to parse {path}: {e}") from e
        if not isinstance(data, dict):
            raise JsonError(f"{path} must contain a JSON object")
        try:
            return Project.model_validate({**data, "root_path": root})
        except ValidationError as e:
            raise JsonError(f"invalid project file {path}: {e}") from e

    log.debug(f"Project file {path} doesn't exist, creating new project")
    return Project(metadata=default_metadata(root), root_path=root)


def default_metadata(root: Path) -> ProjectMetadata:
    """Derive metadata from the directory name and its origin remote."""
    name = root.name
    if not name:
        raise InvalidProjectNameError(root)
    return ProjectMetadata(name=name, repository_url=read_origin_url(root))


def save_project(project: Project) -> Path:
    """Write the whole project state, replacing the previous file."""
    path = project_file_path(project.root_path)
    ensure_dir_is_created(path.parent)
    log.debug(f"Writing project file {path}")
    try:
        path.write_text(
            project.model_dump_json(by_alias=True, indent=2) + "\n", encoding="utf-8"
        )
    except OSError as e:
        raise IoError(f"unable to write {path}: {e}") from e
    return path
