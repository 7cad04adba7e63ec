"""Per-file record builder for unstructured tables.

The builder binds only the columns a scan asks for. Columns derived from the
file's bytes share one memoized read, and text extraction runs only when a
column that needs it is requested.
"""

from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from fedcat.core.errors import ConfigurationError
from fedcat.core.unstructured.columns import (
    BINCONTENT,
    FILETYPE,
    MODIFIEDAT,
    PATH,
    PREVIEW,
    SIZEINBYTES,
    SUBDIR,
    TEXTCONTENT,
    MetaData,
    ProjectionMode,
)
from fedcat.core.unstructured.extract import Extractor, truncate_preview
from fedcat.core.unstructured.filters import PushedFilter, referenced_columns
from fedcat.core.unstructured.source import PartitionedFile


def file_type_of(path: Path) -> str | None:
    """
    Return the file extension without the dot, or None if there is none.

    Only the file name is inspected, so a dot in a parent directory never
    counts, and a leading dot marks a hidden file rather than an extension:
    `.hidden` has no type, while `.hidden.pdf` is `pdf`.
    """
    name = path.name
    index = name.rfind(".")
    if index <= 0:
        return None
    return name[index + 1 :]


def sub_dir_of(path: Path, root_paths: Sequence[Path]) -> str:
    """
    Return the directory between the first matching root path and the file.

    The empty string means the file sits directly under the root.

    Raises:
        ConfigurationError: If no configured root contains the file.
    """
    for root in root_paths:
        if path.is_relative_to(root):
            relative = path.parent.relative_to(root).as_posix()
            return "" if relative == "." else relative
    roots = ", ".join(str(r) for r in root_paths)
    raise ConfigurationError(f"File '{path}' is not under any root path ({roots})")


class UnstructuredRecordBuilder:
    """Build the metadata record and output row for one file."""

    def __init__(
        self,
        file: PartitionedFile,
        content_source: Iterable[bytes],
        columns: Sequence[str],
        *,
        mode: ProjectionMode,
        root_paths: Sequence[Path],
        extractor: Extractor,
        preview_len: int = 0,
        filters: Sequence[PushedFilter] = (),
    ) -> None:
        self.file = file
        self.content_source = content_source
        self.columns = [c.lower() for c in columns]
        self.mode = mode
        self.root_paths = list(root_paths)
        self.extractor = extractor
        self.preview_len = preview_len
        self.filters = filters

        self._resolvers: dict[str, Callable[[MetaData], Any]] = {
            FILETYPE: self._file_type,
            PATH: self._path,
            MODIFIEDAT: self._modified_at,
            SIZEINBYTES: self._size_in_bytes,
            PREVIEW: self._preview,
            SUBDIR: self._sub_dir,
            TEXTCONTENT: self._text_content,
            BINCONTENT: self._bin_content,
        }

    @cached_property
    def content(self) -> bytes:
        """The file's raw bytes, read from the source on first access."""
        return next(iter(self.content_source), b"")

    @cached_property
    def text(self) -> str:
        """Derived text of the whole document."""
        return self.extractor(self.content)

    def needed_columns(self) -> list[str]:
        """Requested columns plus filter columns, limited to this mode."""
        recognized = self.mode.column_names
        needed = [c for c in self.columns if c in recognized]
        for column in sorted(referenced_columns(self.filters)):
            if column in recognized and column not in needed:
                needed.append(column)
        return needed

    def build(self) -> tuple[MetaData, tuple[Any, ...]]:
        """
        Populate the record and project the output row.

        Returns:
            The populated MetaData and the row ordered like the requested
            columns; columns this mode does not know are None.
        """
        record = MetaData()
        values: dict[str, Any] = {}
        for column in self.needed_columns():
            values[column] = self._resolvers[column](record)
        row = tuple(values.get(c) for c in self.columns)
        return record, row

    def _file_type(self, record: MetaData) -> str | None:
        record.file_type = file_type_of(self.file.path)
        return record.file_type

    def _path(self, record: MetaData) -> str:
        record.path = self.file.path.as_uri()
        return record.path

    def _modified_at(self, record: MetaData) -> int:
        record.modified_at = self.file.modified_at
        return record.modified_at

    def _size_in_bytes(self, record: MetaData) -> int:
        record.size_in_bytes = self.file.size
        return record.size_in_bytes

    def _preview(self, record: MetaData) -> str:
        record.preview = truncate_preview(self.text, self.preview_len)
        return record.preview

    def _sub_dir(self, record: MetaData) -> str:
        record.sub_dir = sub_dir_of(self.file.path, self.root_paths)
        return record.sub_dir

    def _text_content(self, record: MetaData) -> str:
        record.text_content = self.text
        return record.text_content

    def _bin_content(self, record: MetaData) -> bytes:
        record.bin_content = self.content
        return record.bin_content
