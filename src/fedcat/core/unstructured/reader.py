"""Partition reading for unstructured tables.

Each assigned file is an independent unit of work: open a scoped byte
source, build the record, evaluate pushed filters, then emit one row or
nothing. Files never share mutable state, so a scan runs them on a thread
pool without locking.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Sequence

from fedcat.core import config
from fedcat.core.errors import ConfigurationError, ExtractionError
from fedcat.core.unstructured.builder import UnstructuredRecordBuilder
from fedcat.core.unstructured.columns import ProjectionMode
from fedcat.core.unstructured.extract import FORMAT_EXTENSIONS, get_extractor
from fedcat.core.unstructured.filters import PushedFilter, evaluate
from fedcat.core.unstructured.source import BinaryFileReader, PartitionedFile

logger = logging.getLogger(__name__)


class TaskContext:
    """
    Execution context of one scan task.

    Completion listeners run exactly once when the task finishes, whether it
    succeeded, failed or was cancelled.
    """

    def __init__(self) -> None:
        self._listeners: list[Callable[[], None]] = []
        self._cancelled = threading.Event()
        self._completed = False
        self._lock = threading.Lock()

    def add_completion_listener(self, listener: Callable[[], None]) -> None:
        with self._lock:
            if not self._completed:
                self._listeners.append(listener)
                return
        listener()

    def cancel(self) -> None:
        """Request cooperative cancellation."""
        self._cancelled.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def mark_completed(self) -> None:
        """Run all completion listeners; the first listener error is re-raised."""
        with self._lock:
            if self._completed:
                return
            self._completed = True
            listeners, self._listeners = self._listeners, []

        first_error: Exception | None = None
        for listener in listeners:
            try:
                listener()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Task completion listener failed: %s", exc)
                first_error = first_error or exc
        if first_error is not None:
            raise first_error

    def __enter__(self) -> TaskContext:
        return self

    def __exit__(self, *exc_info) -> None:
        self.mark_completed()


class ReaderState(str, Enum):
    """
    Lifecycle of a partition reader.

    Values:
        UNOPENED: No byte source acquired yet.
        OPEN: Byte source acquired; the row has not been produced.
        CLOSED: Row emitted or suppressed (or the read failed).
    """

    UNOPENED = "UNOPENED"
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class PartitionReader:
    """Produce at most one row for one file."""

    def __init__(
        self,
        file: PartitionedFile,
        columns: Sequence[str],
        *,
        mode: ProjectionMode,
        root_paths: Sequence[Path],
        extractor: Callable[[bytes], str],
        preview_len: int = 0,
        filters: Sequence[PushedFilter] = (),
        task: TaskContext | None = None,
        source_factory: Callable[[PartitionedFile], Any] = BinaryFileReader,
    ) -> None:
        self.file = file
        self.columns = columns
        self.mode = mode
        self.root_paths = root_paths
        self.extractor = extractor
        self.preview_len = preview_len
        self.filters = filters
        self.task = task
        self.source_factory = source_factory
        self.state = ReaderState.UNOPENED
        self._source = None
        self._row: tuple[Any, ...] | None = None

    def open(self) -> None:
        if self.state is not ReaderState.UNOPENED:
            raise RuntimeError(f"Reader for {self.file.path} is already {self.state.value}")
        self._source = self.source_factory(self.file)
        if self.task is not None:
            self.task.add_completion_listener(self._source.close)
        self.state = ReaderState.OPEN

    def next(self) -> bool:
        """
        Advance to the file's row.

        Returns:
            True if a row is available through `get()`, False at end of
            stream (already consumed, filtered out, or cancelled).
        """
        if self.state is ReaderState.UNOPENED:
            self.open()
        if self.state is ReaderState.CLOSED:
            self._row = None
            return False

        try:
            if self._cancelled():
                return False
            builder = UnstructuredRecordBuilder(
                self.file,
                self._source,
                self.columns,
                mode=self.mode,
                root_paths=self.root_paths,
                extractor=self.extractor,
                preview_len=self.preview_len,
                filters=self.filters,
            )
            record, row = builder.build()
            if self._cancelled() or not evaluate(self.filters, record):
                return False
            self._row = row
            return True
        finally:
            self.close()

    def get(self) -> tuple[Any, ...]:
        if self._row is None:
            raise RuntimeError("No current row; call next() first.")
        return self._row

    def close(self) -> None:
        if self._source is not None:
            self._source.close()
        self.state = ReaderState.CLOSED

    def _cancelled(self) -> bool:
        return self.task is not None and self.task.is_cancelled

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        while self.next():
            yield self.get()

    def __enter__(self) -> PartitionReader:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@dataclass(frozen=True)
class FileScanResult:
    """Outcome of scanning a single file."""

    path: Path
    row: tuple[Any, ...] | None = None
    error: str | None = None

    @property
    def emitted(self) -> bool:
        return self.row is not None


def list_files(root_paths: Iterable[Path], file_format: str) -> list[PartitionedFile]:
    """
    Return every file of `file_format` below the root paths, sorted by path.

    Files keep the path they were found under, symlinks included. A target
    reachable through several paths is listed once, under the first path
    found.
    """
    get_extractor(file_format)
    extensions = FORMAT_EXTENSIONS[file_format.lower()]
    seen: dict[Path, PartitionedFile] = {}
    for root in root_paths:
        root = Path(root).resolve()
        if not root.is_dir():
            raise ConfigurationError(f"Root path '{root}' is not a directory")
        for candidate in sorted(root.rglob("*")):
            if candidate.is_file() and candidate.suffix.lower() in extensions:
                seen.setdefault(candidate.resolve(), PartitionedFile.from_path(candidate))
    return sorted(seen.values(), key=lambda f: f.path)


def scan_files(
    files: Sequence[PartitionedFile],
    columns: Sequence[str],
    *,
    mode: ProjectionMode,
    root_paths: Sequence[Path],
    file_format: str = "pdf",
    preview_len: int | None = None,
    filters: Sequence[PushedFilter] = (),
    max_parallel: int | None = None,
    source_factory: Callable[[PartitionedFile], Any] = BinaryFileReader,
) -> list[FileScanResult]:
    """
    Scan files in parallel, one independent task per file.

    Read and extraction failures are recorded on that file's result and
    never abort sibling files. Configuration errors (a file outside every
    root path, an unknown format) abort the scan.

    Args:
        files: Files assigned to the scan.
        columns: Requested output columns, in row order.
        mode: Metadata or content projection.
        root_paths: Configured roots used to compute `subdir`.
        file_format: Document format selecting the text extractor.
        preview_len: Preview length in characters; defaults to config.
        filters: Pushed filters combined with AND.
        max_parallel: Worker threads; defaults to config.

    Returns:
        One FileScanResult per input file, in input order.
    """
    workers = max_parallel if max_parallel is not None else config.scan_parallel()
    if workers < 1:
        raise ValueError("max_parallel must be >= 1")
    if not files:
        return []

    extractor = get_extractor(file_format)
    roots = [Path(r).resolve() for r in root_paths]
    length = preview_len if preview_len is not None else config.preview_len()

    def _scan_one(file: PartitionedFile) -> FileScanResult:
        with TaskContext() as task:
            reader = PartitionReader(
                file,
                columns,
                mode=mode,
                root_paths=roots,
                extractor=extractor,
                preview_len=length,
                filters=filters,
                task=task,
                source_factory=source_factory,
            )
            try:
                rows = list(reader)
            except (ExtractionError, OSError) as exc:
                logger.warning("Skipping %s: %s", file.path, exc)
                return FileScanResult(path=file.path, error=str(exc))
        return FileScanResult(path=file.path, row=rows[0] if rows else None)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_scan_one, f) for f in files]
        return [f.result() for f in futures]
