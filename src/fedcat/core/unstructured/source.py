"""Physical file access for unstructured scans."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartitionedFile:
    """
    One physical file assigned to a scan task.

    Attributes:
        path: Absolute path of the file.
        size: Size in bytes.
        modified_at: Last modification time in epoch milliseconds.
    """

    path: Path
    size: int
    modified_at: int

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> PartitionedFile:
        # Symlinks stay as discovered so the path remains under its scan root.
        absolute = Path(path).absolute()
        stat = absolute.stat()
        return cls(
            path=absolute,
            size=stat.st_size,
            modified_at=int(stat.st_mtime * 1000),
        )


class BinaryFileReader:
    """
    Scoped byte source for one file.

    Iterating yields exactly one element, the file's full content. The
    underlying handle is opened lazily and released by `close()`.
    """

    def __init__(self, file: PartitionedFile) -> None:
        self.file = file
        self._handle: BinaryIO | None = None
        self._consumed = False
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        return self

    def __next__(self) -> bytes:
        if self._consumed or self.closed:
            raise StopIteration
        if self._handle is None:
            self._handle = open(self.file.path, "rb")
        self._consumed = True
        return self._handle.read()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        if not self.closed:
            logger.debug("Closed byte source for %s", self.file.path)
        self.closed = True

    def __enter__(self) -> BinaryFileReader:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
