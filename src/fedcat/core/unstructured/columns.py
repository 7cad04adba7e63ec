"""Column names and the per-file metadata record of unstructured tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fedcat.core.tables import Column

# Column names are part of the public table schema; do not rename.
FILETYPE = "type"
PATH = "path"
MODIFIEDAT = "modifiedat"
SIZEINBYTES = "sizeinbytes"
PREVIEW = "preview"
SUBDIR = "subdir"
TEXTCONTENT = "textcontent"
BINCONTENT = "bincontent"


class ProjectionMode(str, Enum):
    """
    Which family of derived columns a file scan produces.

    Values:
        METADATA: File facts plus a bounded text preview.
        CONTENT: Full derived text and raw bytes.
    """

    METADATA = "metadata"
    CONTENT = "content"

    @property
    def columns(self) -> tuple[Column, ...]:
        return METADATA_COLUMNS if self is ProjectionMode.METADATA else CONTENT_COLUMNS

    @property
    def column_names(self) -> frozenset[str]:
        return frozenset(c.name for c in self.columns)


METADATA_COLUMNS = (
    Column(FILETYPE, "string"),
    Column(PATH, "string", nullable=False),
    Column(MODIFIEDAT, "bigint", nullable=False),
    Column(SIZEINBYTES, "bigint", nullable=False),
    Column(PREVIEW, "string"),
    Column(SUBDIR, "string", nullable=False),
)

CONTENT_COLUMNS = (
    Column(PATH, "string", nullable=False),
    Column(SUBDIR, "string", nullable=False),
    Column(TEXTCONTENT, "string"),
    Column(BINCONTENT, "binary"),
)

# Columns whose values derive from the file's bytes.
BYTE_COLUMNS = frozenset({PREVIEW, TEXTCONTENT, BINCONTENT})


@dataclass
class MetaData:
    """
    Metadata record of one file, filled field by field.

    Fields that were not requested keep their sentinel defaults
    (-1 for numerics, empty string otherwise).
    """

    file_type: str | None = ""
    path: str = ""
    modified_at: int = -1
    size_in_bytes: int = -1
    preview: str = ""
    sub_dir: str = ""
    text_content: str = ""
    bin_content: bytes = b""

    def value(self, column: str):
        """Return the record value for a column name."""
        return getattr(self, _FIELD_BY_COLUMN[column])


_FIELD_BY_COLUMN = {
    FILETYPE: "file_type",
    PATH: "path",
    MODIFIEDAT: "modified_at",
    SIZEINBYTES: "size_in_bytes",
    PREVIEW: "preview",
    SUBDIR: "sub_dir",
    TEXTCONTENT: "text_content",
    BINCONTENT: "bin_content",
}

ALL_COLUMNS = frozenset(_FIELD_BY_COLUMN)
