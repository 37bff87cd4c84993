import os
from pathlib import Path
from typing import Callable


def unique_dest(dest_dir: Path, name: str, exists: Callable[[Path], bool] | None = None) -> Path:
    """Generate a destination file path that will not collide with existing files.

    ``photo.jpg`` becomes ``photo_1.jpg``, ``photo_2.jpg``, ... until a free
    name is found. The check is best effort: another process may still
    create the same name before we write to it.
    """
    if exists is None:
        exists = os.path.lexists
    base, ext = os.path.splitext(name)
    cand = dest_dir / name
    i = 1
    while exists(cand):
        cand = dest_dir / f"{base}_{i}{ext}"
        i += 1
    return cand


def describe_error(exc: BaseException) -> str:
    """Short, human readable reason for a failed file operation."""
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    text = str(exc)
    return text or exc.__class__.__name__
