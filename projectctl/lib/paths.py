"""Path helpers that keep files inside the project directory."""

from __future__ import annotations

import logging
from pathlib import Path

from projectctl.lib.errors import FileOutsideProjectError, IoError

log = logging.getLogger(__name__)


def canonicalize_path(path: Path) -> Path:
    """Resolve symlinks and `..` components; the path must exist."""
    log.debug(f"Canonicalizing {path}")
    try:
        return path.resolve(strict=True)
    except OSError as e:
        raise IoError(f"unable to canonicalize {path}: {e}") from e


def ensure_dir_is_created(path: Path) -> None:
    if not path.is_dir():
        log.debug(f"Creating directory {path}")
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoError(f"unable to create directory {path}: {e}") from e


def relative_to_root(root: Path, path: Path, strict: bool = True) -> str:
    """Return `path` relative to `root` as a POSIX string.

    Both paths are canonicalized first, so `..` components and symlinks
    pointing outside `root` are detected. With `strict=False` the path does
    not need to exist yet.

    Raises:
        FileOutsideProjectError: If `path` is not strictly inside `root`.
    """
    root = canonicalize_path(root)
    resolved = canonicalize_path(path) if strict else path.resolve()
    try:
        rel = resolved.relative_to(root)
    except ValueError as e:
        raise FileOutsideProjectError(resolved) from e
    if rel == Path("."):
        raise FileOutsideProjectError(resolved)
    return rel.as_posix()
