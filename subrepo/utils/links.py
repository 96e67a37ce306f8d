"""Symlink maintenance shared by every sync step."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from subrepo.logging import get_logger

logger = get_logger("links")


def ensure_symlink(link: str | Path, target: str | Path) -> Path:
    """Point ``link`` at ``target`` with a relative symlink.

    Whatever already sits at ``link`` is removed first: a regular file, a
    directory tree, or a symlink (stale or not). Missing parent directories
    are created. Safe to call on every run.
    """
    link = Path(link)
    target = Path(target)
    logger.debug("Linking %s to %s", format_relative(link), format_relative(target))

    if link.is_symlink() or link.is_file():
        link.unlink()
    elif link.is_dir():
        shutil.rmtree(link)

    link.parent.mkdir(parents=True, exist_ok=True)
    relative = os.path.relpath(os.path.abspath(target), os.path.abspath(link.parent))
    link.symlink_to(relative, target_is_directory=target.is_dir())
    return link


def format_relative(path: str | Path, base: str | Path | None = None) -> str:
    """Return ``path`` relative to ``base`` (default: cwd) for display.

    Paths inside ``base`` get a ``./`` prefix; paths outside keep their
    leading ``..``.
    """
    base = Path(base) if base is not None else Path.cwd()
    rel = Path(os.path.relpath(os.path.abspath(path), os.path.abspath(base))).as_posix()
    if rel == ".":
        return "./"
    return rel if rel.startswith("..") else f"./{rel}"
