"""Template source resolution.

Turns a `TemplateSource` into a local file path:

- git:   checkout in the shared clone cache of the projectctl root
- url:   download into a temporary directory owned by the resolver
- local: canonical path, which must stay inside the project directory
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from projectctl.core.download import download_file
from projectctl.core.git import checkout_file
from projectctl.core.home import ProjectctlHome
from projectctl.lib.errors import TemplateNotFoundError
from projectctl.lib.paths import canonicalize_path, relative_to_root
from projectctl.models import GitSource, LocalSource, TemplateSource, UrlSource

log = logging.getLogger(__name__)

TMP_DIR_PREFIX = "projectctl-"


class TemplateResolver:
    """Resolves template sources for one command invocation.

    Use it as a context manager so downloaded templates are removed when
    the command is done.
    """

    def __init__(self, project_dir: Path, home: ProjectctlHome) -> None:
        self.project_dir = project_dir
        self.home = home
        self._tmp_dir: tempfile.TemporaryDirectory[str] | None = None

    def __enter__(self) -> "TemplateResolver":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def tmp_dir(self) -> Path:
        """Temporary directory for downloads, created on first use."""
        if self._tmp_dir is None:
            self._tmp_dir = tempfile.TemporaryDirectory(prefix=TMP_DIR_PREFIX)
            log.debug(f"Created temporary directory {self._tmp_dir.name}")
        return Path(self._tmp_dir.name)

    def close(self) -> None:
        if self._tmp_dir is not None:
            self._tmp_dir.cleanup()
            self._tmp_dir = None

    def resolve(self, source: TemplateSource) -> Path:
        """Return a local path holding the template content of `source`."""
        if isinstance(source, GitSource):
            return self.resolve_git(source)
        if isinstance(source, UrlSource):
            return self.resolve_url(source)
        if isinstance(source, LocalSource):
            return self.resolve_local(source)
        raise TypeError(f"unsupported template source: {source!r}")

    def resolve_git(self, source: GitSource) -> Path:
        return checkout_file(self.home, source.url, source.template, source.revision)

    def resolve_url(self, source: UrlSource) -> Path:
        return download_file(source.url, self.tmp_dir)

    def resolve_local(self, source: LocalSource) -> Path:
        """Return the canonical template path.

        Raises:
            TemplateNotFoundError: If the template does not exist.
            FileOutsideProjectError: If it resolves outside the project.
        """
        path = self.project_dir / source.path
        if not path.exists():
            raise TemplateNotFoundError(path)
        relative_to_root(self.project_dir, path)
        return canonicalize_path(path)
