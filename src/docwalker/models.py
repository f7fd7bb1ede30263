"""Core docwalker data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Tuple, Union


class DocumentFormat(str, Enum):
    """Source document formats understood by the indexing engine."""

    XML = "XML"
    PDF = "PDF"
    HTML = "HTML"

    @classmethod
    def parse(cls, value: str) -> "DocumentFormat | None":
        """Match a format name case-insensitively."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None

    @classmethod
    def from_file_name(cls, file_name: str) -> "DocumentFormat | None":
        """Deduce the format from a file extension."""
        lowered = file_name.lower()
        if lowered.endswith(".xml"):
            return cls.XML
        if lowered.endswith(".pdf"):
            return cls.PDF
        if lowered.endswith((".htm", ".html")):
            return cls.HTML
        return None


@dataclass(slots=True, frozen=True)
class DirectoryManifest:
    """Sorted snapshot of the immediate entries of one directory."""

    directory: Path
    entries: Tuple[str, ...]
    subdirectory_names: Tuple[str, ...] = ()

    @property
    def file_names(self) -> Tuple[str, ...]:
        subdirs = set(self.subdirectory_names)
        return tuple(name for name in self.entries if name not in subdirs)


@dataclass(slots=True, frozen=True)
class DirectoryDescription:
    """Input handed to the selection function for one directory."""

    dir_path: str
    file_names: Tuple[str, ...]

    def as_dict(self) -> dict:
        return {"dirPath": self.dir_path, "files": list(self.file_names)}


@dataclass(slots=True, frozen=True)
class FileAccept:
    """Selector decision accepting one file for indexing."""

    file_name: str | None
    input_filter: str | None = None
    display_style: str | None = None
    format: str | None = None

    def as_dict(self) -> dict:
        data = {"fileName": self.file_name}
        if self.input_filter:
            data["inputFilter"] = self.input_filter
        if self.display_style:
            data["displayStyle"] = self.display_style
        if self.format:
            data["format"] = self.format
        return data


@dataclass(slots=True, frozen=True)
class FileGroup:
    """Transparent wrapper whose children count as top-level elements."""

    children: Tuple["SelectionElement", ...] = ()

    @classmethod
    def of(cls, *children: "SelectionElement") -> "FileGroup":
        return cls(tuple(children))


@dataclass(slots=True, frozen=True)
class UnknownElement:
    """Element a selector could not express as a known kind."""

    tag: str


SelectionElement = Union[FileGroup, FileAccept, UnknownElement]


@dataclass(slots=True, frozen=True)
class Transform:
    """Loaded transform (stylesheet) referenced by a source record."""

    path: Path
    source: str
    mtime: float


@dataclass(slots=True)
class SourceRecord:
    """Validated description of one file accepted for indexing."""

    source_path: Path
    format: DocumentFormat
    input_filter: Transform | None = None
    display_style: Transform | None = None
