"""Shared error handling for projectctl."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, Iterator, NoReturn

import typer

# sysexits.h
EX_USAGE = 64
EX_DATAERR = 65
EX_UNAVAILABLE = 69
EX_SOFTWARE = 70
EX_CANTCREAT = 73
EX_IOERR = 74


class ProjectctlError(Exception):
    """Base exception for projectctl operations."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class DestExistsError(ProjectctlError):
    """Raised when the destination of a render already exists."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"destination {path} exists (use --force to overwrite)",
            exit_code=EX_CANTCREAT,
        )


class FileOutsideProjectError(ProjectctlError):
    """Raised when a path escapes the project directory."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"file {path} is not contained by project directory", exit_code=EX_USAGE
        )


class MissingTemplateError(ProjectctlError):
    """Raised when --git or --local is used without --template."""

    def __init__(self) -> None:
        super().__init__(
            "--template must be defined if --git or --local is used",
            exit_code=EX_USAGE,
        )


class TemplateNotFoundError(ProjectctlError):
    def __init__(self, path: Path | str) -> None:
        self.path = path
        super().__init__(f"template {path} does not exist", exit_code=EX_DATAERR)


class GitError(ProjectctlError):
    def __init__(self, message: str) -> None:
        super().__init__(f"git error: {message}", exit_code=EX_SOFTWARE)


class HttpError(ProjectctlError):
    def __init__(self, message: str) -> None:
        super().__init__(f"HTTP error: {message}", exit_code=EX_UNAVAILABLE)


class IoError(ProjectctlError):
    def __init__(self, message: str) -> None:
        super().__init__(f"i/o error: {message}", exit_code=EX_IOERR)


class JsonError(ProjectctlError):
    def __init__(self, message: str) -> None:
        super().__init__(f"JSON error: {message}", exit_code=EX_DATAERR)


class TemplateRenderError(ProjectctlError):
    """Raised when a template cannot be parsed or rendered."""

    def __init__(self, path: Path | str, detail: object) -> None:
        self.path = path
        super().__init__(
            f"unable to render template {path}: {detail}", exit_code=EX_DATAERR
        )


class InvalidUtf8Error(ProjectctlError):
    def __init__(self, what: str = "string") -> None:
        super().__init__(f"invalid UTF-8 {what}", exit_code=EX_DATAERR)


class InvalidProjectNameError(ProjectctlError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"unable to derive a project name from {path}", exit_code=EX_DATAERR
        )


class NoDefaultBranchError(ProjectctlError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"repository {url} doesn't have any branch", exit_code=EX_DATAERR)


class InvalidVarsError(ProjectctlError):
    """Raised when user-provided variables cannot be parsed."""

    def __init__(self, message: str) -> None:
        super().__init__(f"invalid variables: {message}", exit_code=EX_USAGE)


def iter_causes(error: BaseException) -> Iterator[BaseException]:
    """Yield the chain of explicit causes behind `error`."""
    cause = error.__cause__
    while cause is not None:
        yield cause
        cause = cause.__cause__


def exit_with_error(
    message: str, exit_code: int = 1, causes: Iterable[BaseException] = ()
) -> NoReturn:
    """Exit the program with an error message and its causes."""
    typer.echo(f"Error: {message}", err=True)
    for cause in causes:
        typer.echo(f"  caused by: {cause}", err=True)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Handle and exit on projectctl errors."""
    if isinstance(error, ProjectctlError):
        exit_with_error(error.message, error.exit_code, iter_causes(error))
    else:
        # Unexpected error
        typer.echo(f"Unexpected error: {error}", err=True)
        sys.exit(1)
