"""Core: projectctl home, git cache, downloads, template resolution, state store"""

from .home import ProjectctlHome, resolve_projectctl_home
from .resolver import TemplateResolver
from .store import load_project, project_file_path, save_project

__all__ = [
    "ProjectctlHome",
    "TemplateResolver",
    "load_project",
    "project_file_path",
    "resolve_projectctl_home",
    "save_project",
]
