"""Run the selection function over a directory manifest."""

from __future__ import annotations

import json
import logging
from typing import Callable, Iterable, List, Optional

from docwalker.errors import SelectionStructureError, SelectorError
from docwalker.models import (
    DirectoryDescription,
    DirectoryManifest,
    FileAccept,
    FileGroup,
    SelectionElement,
)
from docwalker.utils.files import normalize_dir_path

logger = logging.getLogger(__name__)

Selector = Callable[[DirectoryDescription], Optional[Iterable[SelectionElement]]]


def describe_directory(manifest: DirectoryManifest) -> DirectoryDescription:
    """Build the selector input: the directory path and its plain files."""
    return DirectoryDescription(
        dir_path=normalize_dir_path(manifest.directory),
        file_names=manifest.file_names,
    )


class SelectionEvaluator:
    """Applies a swappable selection function to directory manifests."""

    def __init__(self, selector: Selector) -> None:
        self.selector = selector

    def evaluate(self, manifest: DirectoryManifest) -> List[FileAccept]:
        """Return the accepted files of one directory, in selector order.

        The selector is called once per directory. Groups are unwrapped one
        level. Any other element kind raises
        :class:`SelectionStructureError` before anything is returned, so a
        malformed output never yields a partial acceptance. Exceptions raised
        by the selector itself are re-raised as :class:`SelectorError`.
        """
        description = describe_directory(manifest)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Selector input: %s", json.dumps(description.as_dict()))

        try:
            output = list(self.selector(description) or ())
        except Exception as exc:
            raise SelectorError(manifest.directory, repr(exc)) from exc

        accepted: List[FileAccept] = []
        for element in output:
            if isinstance(element, FileGroup):
                for child in element.children:
                    accepted.append(self._expect_accept(manifest, child))
            else:
                accepted.append(self._expect_accept(manifest, element))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Selector output: %s", json.dumps([item.as_dict() for item in accepted])
            )
        return accepted

    @staticmethod
    def _expect_accept(manifest: DirectoryManifest, element: object) -> FileAccept:
        if isinstance(element, FileAccept):
            return element
        raise SelectionStructureError(manifest.directory, element)
