# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Path helpers for releasekit."""

from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if it doesn't exist. Returns the path for chaining."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_under(root: Path, relative: str) -> Path:
    """
    Resolve a config-supplied path against a root directory.

    Absolute paths are returned unchanged; relative ones are joined to `root`.
    """
    candidate = Path(relative)
    if candidate.is_absolute():
        return candidate
    return root / candidate
