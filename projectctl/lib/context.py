"""CLI runtime context."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from projectctl.core.home import ProjectctlHome, resolve_projectctl_home


def _env_snapshot() -> dict[str, str]:
    return dict(os.environ)


@dataclass
class CLIContext:
    """Runtime context from CLI flags/environment."""

    cwd: Path = field(default_factory=Path.cwd)
    project_dir: Path = field(default_factory=Path.cwd)
    projectctl_dir: Path | None = None
    env: dict[str, str] = field(default_factory=_env_snapshot)

    @property
    def home(self) -> ProjectctlHome:
        return resolve_projectctl_home(self.projectctl_dir)

    def path(self, value: Path) -> Path:
        """Resolve a user-given path against the working directory."""
        return self.cwd / value.expanduser()
