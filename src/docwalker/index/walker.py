"""Depth-first discovery of source documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Protocol, Sequence, Set

from docwalker.config import DEFAULT_PROGRESS_INTERVAL
from docwalker.errors import DocWalkerError, SelectionStructureError, SinkError
from docwalker.index.records import SourceRecordBuilder
from docwalker.models import SourceRecord
from docwalker.selection.evaluator import SelectionEvaluator
from docwalker.utils.files import build_manifest

LOGGER = logging.getLogger(__name__)


class IndexingSink(Protocol):
    def submit(self, record: SourceRecord) -> object: ...


class OutcomeKind(str, Enum):
    RECURSED = "recursed"
    TERMINATED = "terminated"


@dataclass(slots=True)
class DirectoryOutcome:
    """Result of visiting one directory.

    ``TERMINATED`` means the subdirectories were not visited: either at least
    one record was submitted, so they were treated as resources of those
    documents, or the directory had already been visited during this run.
    """

    directory: Path
    kind: OutcomeKind
    submitted: int = 0
    skipped: int = 0
    aborted: bool = False
    revisited: bool = False


@dataclass(slots=True)
class WalkState:
    current_directory: Path | None = None
    scanned_count: int = 0
    visited: Set[Path] = field(default_factory=set)


@dataclass(slots=True)
class WalkStats:
    directories_visited: int = 0
    submitted: int = 0
    skipped: int = 0
    aborted_directories: List[Path] = field(default_factory=list)
    failed_roots: List[Path] = field(default_factory=list)
    submitted_files: List[Path] = field(default_factory=list)

    def record(self, outcome: DirectoryOutcome) -> None:
        self.directories_visited += 1
        self.submitted += outcome.submitted
        self.skipped += outcome.skipped
        if outcome.aborted:
            self.aborted_directories.append(outcome.directory)


class DirectoryWalker:
    """Walks source trees and forwards accepted documents to a sink."""

    def __init__(
        self,
        evaluator: SelectionEvaluator,
        builder: SourceRecordBuilder,
        sink: IndexingSink,
        *,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
        on_progress: Callable[[int], None] | None = None,
    ) -> None:
        self.evaluator = evaluator
        self.builder = builder
        self.sink = sink
        self.progress_interval = max(progress_interval, 1)
        self.on_progress = on_progress
        self.state = WalkState()
        self._stats = WalkStats()

    def reset(self) -> None:
        self.state = WalkState()
        self._stats = WalkStats()

    def run(self, roots: Sequence[Path], *, keep_going: bool = False) -> WalkStats:
        """Walk every root in order, starting from a fresh state.

        Fatal errors (unlistable directories, selector, transform and sink
        failures, all raised as :class:`DocWalkerError`) propagate unless
        ``keep_going`` is set, in which case the failing root is logged and
        the next one is walked. Other exceptions always propagate.
        """
        self.reset()
        for root in roots:
            try:
                self.walk(root)
            except (DocWalkerError, OSError) as exc:
                if not keep_going:
                    raise
                LOGGER.error("Failed to scan %s: %s", root, exc)
                self._stats.failed_roots.append(Path(root))
        return self._stats

    def walk(self, root: Path) -> WalkStats:
        LOGGER.info("Scanning %s", root)
        self.process_directory(Path(root))
        return self._stats

    def process_directory(self, directory: Path) -> DirectoryOutcome:
        self.state.current_directory = directory
        canonical = directory.resolve()
        if canonical in self.state.visited:
            LOGGER.warning("Skipping %s: already visited as %s", directory, canonical)
            return DirectoryOutcome(
                directory=directory, kind=OutcomeKind.TERMINATED, revisited=True
            )
        self.state.visited.add(canonical)

        manifest = build_manifest(directory)

        outcome = DirectoryOutcome(directory=directory, kind=OutcomeKind.RECURSED)
        if manifest.file_names:
            try:
                accepted = self.evaluator.evaluate(manifest)
            except SelectionStructureError as exc:
                LOGGER.error("Skipping selection for %s: %s", directory, exc)
                accepted = []
                outcome.aborted = True

            for accept in accepted:
                record = self.builder.build(directory, accept)
                if record is None:
                    outcome.skipped += 1
                    continue
                self._submit(record)
                outcome.submitted += 1

        if outcome.submitted:
            outcome.kind = OutcomeKind.TERMINATED
        self._stats.record(outcome)

        if outcome.kind is OutcomeKind.RECURSED:
            for name in manifest.subdirectory_names:
                self.process_directory(directory / name)
            self.state.current_directory = directory
        return outcome

    def _submit(self, record: SourceRecord) -> None:
        if self.state.scanned_count % self.progress_interval == 0:
            LOGGER.info("Scanned %d files", self.state.scanned_count)
            if self.on_progress is not None:
                self.on_progress(self.state.scanned_count)
        self.state.scanned_count += 1

        try:
            self.sink.submit(record)
        except DocWalkerError:
            raise
        except Exception as exc:
            raise SinkError(record.source_path, repr(exc)) from exc
        self._stats.submitted_files.append(record.source_path)
