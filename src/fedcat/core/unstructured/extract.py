"""Text extraction from raw document bytes.

Extractors are pure functions `bytes -> str`, one per document format.
Malformed input raises ExtractionError, which fails only the affected file.
"""

from __future__ import annotations

import io
from typing import Callable

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from fedcat.core.errors import ConfigurationError, ExtractionError

Extractor = Callable[[bytes], str]


def pdf_text(content: bytes) -> str:
    """
    Return the text of every page of a PDF document.

    pypdf surfaces damaged documents as arbitrary exceptions (TypeError,
    KeyError, AttributeError, ...) besides its own PyPdfError; all of them
    become ExtractionError so only the affected file fails.
    """
    try:
        reader = PdfReader(io.BytesIO(content))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except PyPdfError as exc:
        raise ExtractionError(f"Could not extract text from PDF: {exc}") from exc
    except Exception as exc:  # noqa: BLE001
        raise ExtractionError(
            f"Could not extract text from PDF: {type(exc).__name__}: {exc}"
        ) from exc


def plain_text(content: bytes) -> str:
    """Decode a UTF-8 text document."""
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ExtractionError(f"Document is not valid UTF-8: {exc}") from exc


EXTRACTORS: dict[str, Extractor] = {
    "pdf": pdf_text,
    "text": plain_text,
}

FORMAT_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "pdf": (".pdf",),
    "text": (".txt", ".md", ".csv", ".log"),
}


def get_extractor(file_format: str) -> Extractor:
    """Return the extractor registered for `file_format`."""
    try:
        return EXTRACTORS[file_format.lower()]
    except KeyError as exc:
        known = ", ".join(sorted(EXTRACTORS))
        raise ConfigurationError(
            f"Unsupported document format '{file_format}' (expected one of: {known})"
        ) from exc


def truncate_preview(text: str, preview_len: int) -> str:
    """Cap `text` at `preview_len` characters; 0 or less keeps the full text."""
    if preview_len > 0 and len(text) > preview_len:
        return text[:preview_len]
    return text
