"""Run-scoped cache of transforms referenced by source records."""

from __future__ import annotations

import logging
from collections import OrderedDict
from pathlib import Path
from typing import Callable

from docwalker.config import DEFAULT_TRANSFORM_CACHE_SIZE
from docwalker.errors import TransformLoadError
from docwalker.models import Transform

logger = logging.getLogger(__name__)


def load_transform(path: Path) -> Transform:
    """Read a transform from disk."""
    try:
        source = path.read_text(encoding="utf-8")
        mtime = path.stat().st_mtime
    except (OSError, UnicodeDecodeError) as exc:
        raise TransformLoadError(path, str(exc)) from exc
    return Transform(path=path, source=source, mtime=mtime)


class TransformCache:
    """Least-recently-used cache of loaded transforms keyed by canonical path.

    An entry whose file changed on disk since it was loaded is loaded again.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_TRANSFORM_CACHE_SIZE,
        loader: Callable[[Path], Transform] = load_transform,
    ) -> None:
        self.max_entries = max(max_entries, 1)
        self.loader = loader
        self._entries: OrderedDict[Path, Transform] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def find(self, path: Path) -> Transform:
        key = Path(path).resolve()
        cached = self._entries.get(key)
        if cached is not None and not self._is_stale(cached):
            self._entries.move_to_end(key)
            return cached

        logger.debug("Loading transform %s", key)
        transform = self.loader(key)
        self._entries[key] = transform
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted transform %s", evicted)
        return transform

    def clear(self) -> None:
        self._entries.clear()

    @staticmethod
    def _is_stale(transform: Transform) -> bool:
        try:
            return transform.path.stat().st_mtime != transform.mtime
        except OSError:
            return True
