"""Path normalization helpers for descriptor rendering.

Descriptor paths are consumed on every platform, so everything returned from
this module uses forward slashes.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from scarb_eject.errors import PathResolutionFailure

PathLike = Union[str, Path]


def to_posix(path: str) -> str:
    """Replace Windows separators with forward slashes.

    Examples:
        >>> to_posix("..\\\\lib\\\\src")
        '../lib/src'
    """
    return path.replace("\\", "/")


def absolute_path(path: PathLike) -> str:
    """Return a normalized absolute path without resolving symlinks.

    Relative inputs are anchored at the current working directory.

    Raises:
        PathResolutionFailure: If the path is empty or the working directory
            cannot be determined.
    """
    raw = os.fspath(path)
    if not raw:
        raise PathResolutionFailure("cannot resolve an empty path")
    try:
        return os.path.normpath(os.path.abspath(raw))
    except OSError as exc:
        raise PathResolutionFailure(f"cannot resolve path {raw}: {exc}") from exc


def relativize_path(path: PathLike, base_dir: PathLike) -> str:
    """Express ``path`` relative to ``base_dir`` using forward slashes.

    The result is the shortest ``..``-prefixed path from ``base_dir`` to
    ``path``. When no relative path exists (different drives on Windows) the
    absolute path is returned instead.

    Examples:
        >>> relativize_path("/ws/lib/src", "/ws/app")
        '../lib/src'
        >>> relativize_path("/ws/app", "/ws/app")
        '.'
    """
    target = absolute_path(path)
    base = absolute_path(base_dir)
    try:
        relative = os.path.relpath(target, base)
    except ValueError:
        return to_posix(target)
    return to_posix(relative)


def render_source_root(path: PathLike, base_dir: Optional[PathLike]) -> str:
    """Render a crate root for a descriptor located in ``base_dir``.

    Args:
        path: Source root, absolute or relative to the working directory.
        base_dir: Directory holding the descriptor, or None when the
            descriptor has no location (standard output).

    Returns:
        str: Relative path when ``base_dir`` is given, absolute otherwise.
    """
    if base_dir is None:
        return to_posix(absolute_path(path))
    return relativize_path(path, base_dir)


__all__ = ["absolute_path", "relativize_path", "render_source_root", "to_posix"]
