"""Destination directory resolution and the pre-flight collision check."""

from __future__ import annotations

from pathlib import Path


def resolve_target(working_directory: str | Path, project_name: str) -> Path:
    """Return the directory a project named *project_name* is created in.

    Pure: the filesystem is not consulted.
    """
    return Path(working_directory) / project_name


def target_exists(target: Path) -> bool:
    """True if anything (directory, file, or dangling symlink) occupies *target*."""
    return target.exists() or target.is_symlink()
