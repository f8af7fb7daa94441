"""Shared utilities for CLI commands"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from rich.console import Console
from rich.logging import RichHandler

from projectctl.lib.errors import InvalidVarsError

DEBUG_ENV = "PROJECTCTL_DEBUG"

console = Console()


def setup_logging(verbosity: int = 0, quiet: bool = False, no_color: bool = False) -> None:
    """Configure logging for the projectctl CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Quiet (-q): Only errors shown
    - Verbose (-v): INFO level - shows checkouts, rendered and updated files
    - Debug (-vv or PROJECTCTL_DEBUG=1): DEBUG level - shows everything
    """
    debug_env = bool(os.environ.get(DEBUG_ENV))
    if debug_env or verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    if no_color:
        console.no_color = True

    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=verbosity > 0,
        show_path=debug_env,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("projectctl")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def parse_vars(vars_json: Optional[str], vars_file: Optional[Path]) -> Any:
    """Parse template variables from `--vars` and `--vars-file`.

    The file is read first; when both values are objects `--vars` is merged
    on top of it, otherwise `--vars` replaces it.
    """
    from_file = None
    if vars_file is not None:
        try:
            with open(vars_file, "r", encoding="utf-8") as f:
                from_file = yaml.safe_load(f)
        except OSError as e:
            raise InvalidVarsError(f"unable to read {vars_file}: {e}") from e
        except yaml.YAMLError as e:
            raise InvalidVarsError(f"unable to parse {vars_file}: {e}") from e

    if vars_json is None:
        return from_file

    try:
        from_arg = json.loads(vars_json)
    except ValueError as e:
        raise InvalidVarsError(f"--vars must be valid JSON: {e}") from e

    if isinstance(from_file, dict) and isinstance(from_arg, dict):
        return {**from_file, **from_arg}
    return from_arg
