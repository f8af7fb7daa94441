"""PROJECTCTL_ROOT_DIR resolution and directory structure"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import NamedTuple

from projectctl.lib.digest import hash_bytes

log = logging.getLogger(__name__)

ROOT_DIR_ENV = "PROJECTCTL_ROOT_DIR"


class ProjectctlHome(NamedTuple):
    """
    Resolved projectctl root directory.

    Structure:
        $PROJECTCTL_ROOT_DIR/
        └── repositories/<sha256(url)>/   # full working clones of template repos
    """

    root: Path  # $PROJECTCTL_ROOT_DIR (default: ~/.projectctl)

    @property
    def repositories(self) -> Path:
        """$PROJECTCTL_ROOT_DIR/repositories/"""
        return self.root / "repositories"

    def repo_path(self, url: str) -> Path:
        """$PROJECTCTL_ROOT_DIR/repositories/<sha256(url)>/"""
        return self.repositories / hash_bytes(url)


def resolve_projectctl_home(override: str | Path | None = None) -> ProjectctlHome:
    """
    Resolve the projectctl root directory.

    Priority:
    1. Explicit override (--projectctl-dir)
    2. PROJECTCTL_ROOT_DIR environment variable
    3. ~/.projectctl (default)
    """
    if override:
        root = Path(override).expanduser()
        log.debug(f"Using projectctl root override: {root}")
        return ProjectctlHome(root=root)

    env_root = os.environ.get(ROOT_DIR_ENV)
    if env_root:
        root = Path(env_root).expanduser()
        log.debug(f"Using {ROOT_DIR_ENV} from env: {root}")
        return ProjectctlHome(root=root)

    root = Path.home() / ".projectctl"
    log.debug(f"Using default projectctl root: {root}")
    return ProjectctlHome(root=root)
