"""Validate selector decisions into source records."""

from __future__ import annotations

import logging
from pathlib import Path

from docwalker.index.transforms import TransformCache
from docwalker.models import DocumentFormat, FileAccept, SourceRecord, Transform
from docwalker.utils.files import is_readable_file, resolve_rel_or_abs

LOGGER = logging.getLogger(__name__)


class SourceRecordBuilder:
    """Turns accepted files into validated :class:`SourceRecord` objects.

    Per-file problems are logged and reported by returning ``None``. Failures
    loading a referenced transform propagate as
    :class:`~docwalker.errors.TransformLoadError`.
    """

    def __init__(self, transforms: TransformCache, home_path: Path) -> None:
        self.transforms = transforms
        self.home_path = Path(home_path)

    def build(self, directory: Path, accept: FileAccept) -> SourceRecord | None:
        if not accept.file_name:
            LOGGER.error("Selector must return a file name (directory %s)", directory)
            return None

        source_path = (Path(directory) / accept.file_name).resolve()
        if not is_readable_file(source_path):
            LOGGER.error("Cannot read input document '%s'", source_path)
            return None

        input_filter = self._find_transform(accept.input_filter)
        display_style = self._find_transform(accept.display_style)

        if accept.format:
            doc_format = DocumentFormat.parse(accept.format)
            if doc_format is None:
                LOGGER.error("Selector returned unknown format '%s' for %s", accept.format, source_path)
                return None
        else:
            doc_format = DocumentFormat.from_file_name(accept.file_name)
            if doc_format is None:
                LOGGER.warning("Cannot deduce format from extension on file '%s'", source_path)
                return None

        return SourceRecord(
            source_path=source_path,
            format=doc_format,
            input_filter=input_filter,
            display_style=display_style,
        )

    def _find_transform(self, reference: str | None) -> Transform | None:
        if not reference:
            return None
        return self.transforms.find(resolve_rel_or_abs(self.home_path, reference))
