from __future__ import annotations

import os
from typing import Optional, Union

from .errors import DirectoryNotFoundError, InvalidArgumentError


def require_directory(directory: Optional[Union[str, os.PathLike]]) -> str:
    """Validate a caller-supplied directory and return it as a str path."""
    if directory is None:
        raise InvalidArgumentError("directory must not be None")
    path = os.fspath(directory)
    if not path:
        raise InvalidArgumentError("directory must not be empty")
    if not os.path.isdir(path):
        raise DirectoryNotFoundError(f"Directory not found: {path}")
    return path


def archive_name(path: str, root: str) -> str:
    """Map a filesystem path under ``root`` to a forward-slash entry name.

    Rules:
    - Relative to ``root``, never starting with a slash
    - OS separators converted to '/'
    - Reject paths outside ``root``
    """
    rel = os.path.relpath(os.path.abspath(path), os.path.abspath(root))
    parts = [q for q in rel.replace(os.sep, "/").split("/") if q not in ("", ".")]
    for q in parts:
        if q == "..":
            raise ValueError(f"Path is outside the snapshot root: {path}")
    return "/".join(parts)


def dir_entry_name(path: str, root: str) -> str:
    return archive_name(path, root) + "/"
