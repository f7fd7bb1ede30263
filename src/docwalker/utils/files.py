"""Utility helpers for working with files and directories."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from docwalker.errors import DirectoryListingError
from docwalker.models import DirectoryManifest


def build_manifest(directory: Path) -> DirectoryManifest:
    """List the immediate entries of a directory in code-point order.

    Subdirectories (including symlinks to directories) are reported
    separately; their contents are not listed.
    """
    directory = Path(directory)
    try:
        names = sorted(os.listdir(directory))
    except OSError as exc:
        raise DirectoryListingError(directory, exc.strerror or str(exc)) from exc

    subdirs = tuple(name for name in names if (directory / name).is_dir())
    return DirectoryManifest(directory=directory, entries=tuple(names), subdirectory_names=subdirs)


def normalize_dir_path(directory: Path) -> str:
    """Return a directory path with forward slashes and a trailing slash."""
    text = str(directory).replace("\\", "/")
    if not text.endswith("/"):
        text += "/"
    return text


def resolve_rel_or_abs(base_dir: Path, path: str | Path) -> Path:
    """Resolve ``path`` against ``base_dir`` unless it is already absolute."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate.resolve()
    return (Path(base_dir) / candidate).resolve()


def is_readable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash for a file."""
    sha = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1 << 20), b""):
            sha.update(chunk)
    return sha.hexdigest()
