"""Text and metadata extraction using PyMuPDF."""
from __future__ import annotations

import logging
import re
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

import fitz  # PyMuPDF

from .errors import UnreadablePDF
from .types import DocumentMetadata

logger = logging.getLogger(__name__)

# MuPDF contexts are not thread-safe; every document operation holds this lock.
mupdf_lock = threading.RLock()

_WHITESPACE_RE = re.compile(r"\s+")


def read_pdf_bytes(path: Union[str, Path]) -> bytes:
    """Return the raw bytes of ``path`` or raise :class:`UnreadablePDF`."""

    file_path = Path(path)
    if not file_path.exists():
        raise UnreadablePDF(file_path, "file not found")
    if not file_path.is_file():
        raise UnreadablePDF(file_path, "not a regular file")
    try:
        return file_path.read_bytes()
    except OSError as exc:
        raise UnreadablePDF(file_path, exc.strerror or str(exc)) from exc


@contextmanager
def open_document(data: bytes, name: str = "<stream>") -> Iterator[fitz.Document]:
    """Open ``data`` as a PDF while holding :data:`mupdf_lock`.

    Empty, corrupt, encrypted and page-less streams raise
    :class:`UnreadablePDF`.
    """

    if not data:
        raise UnreadablePDF(name, "file is empty")
    with mupdf_lock:
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as exc:
            raise UnreadablePDF(name, str(exc) or "cannot parse PDF") from exc
        try:
            if doc.needs_pass:
                raise UnreadablePDF(name, "document is encrypted")
            if doc.page_count == 0:
                raise UnreadablePDF(name, "document has no pages")
            yield doc
        finally:
            doc.close()


def normalize_text(text: str) -> str:
    """Collapse whitespace runs (newlines included) and trim the result."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_text(data: bytes, name: str = "<stream>") -> str:
    """Return the normalized text of every page, in page order."""

    with open_document(data, name) as doc:
        try:
            chunks = [page.get_text("text") for page in doc]
        except (RuntimeError, ValueError) as exc:
            raise UnreadablePDF(name, f"text extraction failed: {exc}") from exc
    text = normalize_text("\n".join(chunks))
    logger.debug("Extracted %d characters of text from %s", len(text), name)
    return text


def extract_metadata(data: bytes, name: str = "<stream>") -> DocumentMetadata:
    """Return the document information mapping verbatim."""

    with open_document(data, name) as doc:
        return dict(doc.metadata or {})

