"""Selection functions shipped with docwalker."""

from __future__ import annotations

from typing import List

from docwalker.models import DirectoryDescription, DocumentFormat, FileAccept


def select_by_extension(description: DirectoryDescription) -> List[FileAccept]:
    """Accept every file whose extension maps to a known document format."""
    return [
        FileAccept(file_name=name)
        for name in description.file_names
        if DocumentFormat.from_file_name(name) is not None
    ]
