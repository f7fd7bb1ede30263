"""Application configuration defaults and the chunking invariant."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

MIN_CHUNK_SIZE = 2
DEFAULT_CHUNK_SIZE = 100
DEFAULT_CHUNK_OVERLAP = 50
DEFAULT_PROGRESS_INTERVAL = 200
DEFAULT_TRANSFORM_CACHE_SIZE = 100
DEFAULT_SELECTOR = "docwalker.selection.builtin:select_by_extension"


class ChunkConfig:
    """Chunk size and overlap (in words) used to split indexed text.

    Both values are only changed through :meth:`set_size` and
    :meth:`set_overlap`, which silently coerce out-of-range input so that
    ``MIN_CHUNK_SIZE <= size`` and ``0 <= overlap <= size // 2`` always hold.
    Changing the size re-validates the overlap; changing the overlap never
    touches the size.
    """

    __slots__ = ("_size", "_overlap")

    def __init__(self) -> None:
        self._size = DEFAULT_CHUNK_SIZE
        self._overlap = DEFAULT_CHUNK_OVERLAP

    @classmethod
    def from_values(cls, size: int, overlap: int) -> "ChunkConfig":
        config = cls()
        config.set_size(size)
        config.set_overlap(overlap)
        return config

    @property
    def size(self) -> int:
        return self._size

    @property
    def overlap(self) -> int:
        return self._overlap

    def set_size(self, new_size: int) -> int:
        """Set the chunk size, returning the (possibly coerced) value."""
        if new_size < MIN_CHUNK_SIZE:
            new_size = MIN_CHUNK_SIZE
        self._size = new_size
        self.set_overlap(self._overlap)
        return self._size

    def set_overlap(self, new_overlap: int) -> int:
        """Set the chunk overlap, returning the (possibly coerced) value."""
        if new_overlap > self._size // 2:
            new_overlap = self._size // 2
        if new_overlap < 0:
            new_overlap = 0
        self._overlap = new_overlap
        return self._overlap

    def as_dict(self) -> dict[str, int]:
        return {"chunk_size": self._size, "chunk_overlap": self._overlap}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChunkConfig):
            return NotImplemented
        return (self._size, self._overlap) == (other._size, other._overlap)

    def __repr__(self) -> str:
        return f"ChunkConfig(size={self._size}, overlap={self._overlap})"


@dataclass(slots=True)
class AppConfig:
    home_path: Path = field(default_factory=Path.cwd)
    db_path: Path = Path("data/docwalker.db")
    selector: str = DEFAULT_SELECTOR
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    transform_cache_size: int = DEFAULT_TRANSFORM_CACHE_SIZE

    def chunk_config(self) -> ChunkConfig:
        return ChunkConfig.from_values(self.chunk_size, self.chunk_overlap)

    def resolve_db_path(self, base_dir: Path | None = None) -> Path:
        if Path(self.db_path).is_absolute() or base_dir is None:
            return Path(self.db_path)
        return base_dir / self.db_path
