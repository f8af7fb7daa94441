"""HTTP(S) template downloads"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from projectctl.lib.digest import hash_bytes
from projectctl.lib.errors import HttpError, IoError

log = logging.getLogger(__name__)


def download_file(url: str, dest_dir: Path) -> Path:
    """Download `url` into `dest_dir/<sha256(url)>` and return the file path.

    Nothing is cached across invocations: every call downloads again and
    overwrites the previous file.
    """
    path = dest_dir / hash_bytes(url)
    log.debug(f"Downloading {url} into {path}")
    try:
        with httpx.stream("GET", url, follow_redirects=True) as response:
            response.raise_for_status()
            size = 0
            with open(path, "wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)
                    size += len(chunk)
    except httpx.HTTPError as e:
        raise HttpError(f"unable to download {url}: {e}") from e
    except OSError as e:
        raise IoError(f"unable to write {path}: {e}") from e
    log.debug(f"Downloaded {size} bytes from {url}")
    return path
