from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

import fitz
import pytest

BASE_METADATA = {
    "title": "Quarterly Report",
    "author": "QA",
    "subject": "",
    "keywords": "",
    "creator": "pdfequiv tests",
    "producer": "pdfequiv tests",
    "creationDate": "D:20240101000000",
    "modDate": "D:20240101000000",
}

PageSpec = Dict[str, object]


def write_pdf(
    path: Path,
    pages: Sequence[PageSpec],
    metadata: Optional[Dict[str, str]] = None,
    size: tuple[float, float] = (200, 200),
) -> Path:
    """Create a PDF where each page spec may carry ``text`` and filled ``rects``."""

    doc = fitz.open()
    for spec in pages:
        page = doc.new_page(width=size[0], height=size[1])
        text = spec.get("text")
        if text:
            page.insert_text((20, 40), str(text), fontsize=12)
        for rect in spec.get("rects", ()):  # type: ignore[union-attr]
            page.draw_rect(fitz.Rect(*rect), color=(0, 0, 0), fill=(0, 0, 0))
    doc.set_metadata({**BASE_METADATA, **(metadata or {})})
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(
        filename: str,
        pages: Sequence[PageSpec] = ({"text": "Hello"},),
        metadata: Optional[Dict[str, str]] = None,
        size: tuple[float, float] = (200, 200),
    ) -> Path:
        return write_pdf(tmp_path / filename, pages, metadata=metadata, size=size)

    return _create
