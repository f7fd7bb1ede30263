"""Text helpers including word-bounded chunking."""

from __future__ import annotations

from typing import Iterator

from docwalker.config import ChunkConfig


def iter_word_chunks(text: str, config: ChunkConfig) -> Iterator[str]:
    """Split text into chunks of ``config.size`` words.

    Consecutive chunks share ``config.overlap`` words. The final chunk may be
    shorter and is only produced once.
    """
    words = text.split()
    if not words:
        return

    step = config.size - config.overlap
    for start in range(0, len(words), step):
        yield " ".join(words[start : start + config.size])
        if start + config.size >= len(words):
            break

