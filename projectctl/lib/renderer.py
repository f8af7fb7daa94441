"""Jinja2 template rendering.

Templates see four top-level values:

- `env`: environment variables of the invocation
- `git`: git configuration, dots replaced by underscores (`git.user_name`)
- `project`: project metadata (`name`, `description`, `repository`)
- `var`: the JSON variables given by the caller

Two filters embed structured data verbatim: `json_encode` and
`json_encode_pretty`.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
)

from projectctl.lib.digest import hash_file
from projectctl.lib.errors import (
    InvalidUtf8Error,
    IoError,
    TemplateNotFoundError,
    TemplateRenderError,
)
from projectctl.lib.paths import ensure_dir_is_created
from projectctl.models import RenderContext, RenderedFile

log = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".j2"
IGNORED_NAMES = frozenset({".git"})

# Errors raised by filters (e.g. a value that is not JSON serializable)
_RENDER_ERRORS = (TemplateError, TypeError, ValueError)


def json_encode(value: Any) -> str:
    """Encode `value` as compact JSON."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def json_encode_pretty(value: Any) -> str:
    """Encode `value` as indented JSON."""
    return json.dumps(value, ensure_ascii=False, indent=2)


def detect_newline(source: str) -> str:
    """Line ending used by `source`, CRLF winning over a lone CR."""
    if "\r\n" in source:
        return "\r\n"
    if "\r" in source:
        return "\r"
    return "\n"


def create_environment(
    loader: FileSystemLoader | None = None, newline_sequence: str = "\n"
) -> Environment:
    """Create a Jinja2 Environment with the projectctl filters.

    Undefined values are errors, and trailing newlines are kept so a
    template without placeholders renders to identical bytes as long as
    `newline_sequence` matches the template line endings.
    """
    env = Environment(
        loader=loader,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        newline_sequence=newline_sequence,
        autoescape=False,
    )
    env.filters["json_encode"] = json_encode
    env.filters["json_encode_pretty"] = json_encode_pretty
    return env


def _write(dest: Path, content: str) -> None:
    try:
        with open(dest, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise IoError(f"unable to write {dest}: {e}") from e


class TemplateRenderer:
    """Renders template files and template directories."""

    def render(
        self,
        template_path: Path,
        dest: Path,
        variables: Any,
        context: RenderContext,
    ) -> RenderedFile:
        """Render `template_path` into `dest`, overwriting it.

        Returns the checksum of the written file and the variables used.

        Raises:
            TemplateNotFoundError: If the template file does not exist.
            TemplateRenderError: If parsing or rendering fails.
        """
        log.debug(f"Parsing template {template_path}")
        loader = FileSystemLoader(str(template_path.parent))
        template = self._load(loader, template_path)
        log.debug(f"Rendering {template_path} into {dest}")
        content = self._render(template, context.template_values(variables), template_path)
        _write(dest, content)
        return RenderedFile(checksum=hash_file(dest), vars=variables)

    def render_tree(
        self,
        template_dir: Path,
        dest_dir: Path,
        variables: Any,
        context: RenderContext,
    ) -> None:
        """Render a template directory recursively into `dest_dir`.

        Entry names are rendered as templates too. Files ending in `.j2` are
        rendered without the suffix, other files are copied as they are, and
        `.git` directories are skipped.
        """
        log.info(f"Rendering files from template {template_dir.name}")
        loader = FileSystemLoader(str(template_dir))
        values = context.template_values(variables)
        env = create_environment(loader)
        self._render_dir(loader, env, template_dir, dest_dir, values)

    def _render_dir(
        self,
        loader: FileSystemLoader,
        env: Environment,
        current: Path,
        dest_dir: Path,
        values: dict[str, Any],
    ) -> None:
        for entry in sorted(current.iterdir()):
            if entry.name in IGNORED_NAMES:
                log.debug(f"Ignoring {entry}")
                continue

            name = self._render_name(env, entry, values)
            if entry.is_dir():
                target = dest_dir / name
                ensure_dir_is_created(target)
                self._render_dir(loader, env, entry, target, values)
            elif entry.name.endswith(TEMPLATE_SUFFIX):
                target = dest_dir / name.removesuffix(TEMPLATE_SUFFIX)
                template = self._load(loader, entry)
                log.debug(f"Rendering {entry} into {target}")
                _write(target, self._render(template, values, entry))
            else:
                target = dest_dir / name
                log.debug(f"Copying {entry} to {target}")
                try:
                    shutil.copy2(entry, target)
                except OSError as e:
                    raise IoError(f"unable to copy {entry} to {target}: {e}") from e

    def _render_name(self, env: Environment, entry: Path, values: dict[str, Any]) -> str:
        try:
            name = env.from_string(entry.name).render(values)
        except _RENDER_ERRORS as e:
            raise TemplateRenderError(entry, e) from e
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise TemplateRenderError(entry, f"invalid rendered file name {name!r}")
        return name

    def _load(self, loader: FileSystemLoader, path: Path) -> Template:
        """Compile `path`, keeping its line endings.

        The source is read without newline translation since
        `FileSystemLoader` would turn CRLF into LF. The loader stays
        attached for `include` and `extends`.
        """
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                source = f.read()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise TemplateNotFoundError(path) from e
        except OSError as e:
            raise IoError(f"unable to read {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise InvalidUtf8Error(f"template {path}") from e

        env = create_environment(loader, detect_newline(source))
        try:
            return env.from_string(source)
        except TemplateError as e:
            raise TemplateRenderError(path, e) from e

    def _render(self, template: Template, values: dict[str, Any], path: Path) -> str:
        try:
            return template.render(values)
        except _RENDER_ERRORS as e:
            raise TemplateRenderError(path, e) from e
