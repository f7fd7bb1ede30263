"""Exception types raised while discovering documents."""

from __future__ import annotations

from pathlib import Path


class DocWalkerError(Exception):
    """Base class for docwalker errors."""


class SelectionStructureError(DocWalkerError):
    """The selection function returned an element of an unknown kind."""

    def __init__(self, directory: Path | str, element: object) -> None:
        self.directory = directory
        self.element = element
        super().__init__(f"Selector returned unknown element {element!r} for {directory}")


class DirectoryListingError(DocWalkerError):
    """A directory in the source tree could not be listed."""

    def __init__(self, directory: Path | str, reason: str) -> None:
        self.directory = directory
        super().__init__(f"Cannot list directory {directory}: {reason}")


class SelectorLoadError(DocWalkerError):
    """The selection function could not be loaded."""


class TransformLoadError(DocWalkerError):
    """A transform referenced by the selector could not be loaded."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot load transform {path}: {reason}")


class SelectorError(DocWalkerError):
    """The selection function failed while evaluating a directory."""

    def __init__(self, directory: Path | str, reason: str) -> None:
        self.directory = directory
        super().__init__(f"Selector failed for {directory}: {reason}")


class SinkError(DocWalkerError):
    """The indexing sink rejected a source record."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot submit {path}: {reason}")
