"""Deterministic page rasterization into fixed-size canvases."""
from __future__ import annotations

import logging
from typing import List

import fitz  # PyMuPDF
import numpy as np

from .errors import RenderFailure
from .extraction import open_document
from .types import PageRaster

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 1000
DEFAULT_HEIGHT = 1414


def render_page(page: fitz.Page, page_number: int, width: int, height: int) -> PageRaster:
    """Render ``page`` at scale 1.0 onto a transparent ``width`` x ``height`` canvas.

    The page pixmap is anchored at the top-left corner. Content that falls
    outside the canvas is clipped and canvas area not covered by the page
    stays fully transparent. This is not a scale-to-fit operation.
    """

    pix = page.get_pixmap(matrix=fitz.Identity, colorspace=fitz.csRGB, alpha=False)
    rendered = np.frombuffer(pix.samples, dtype=np.uint8).reshape(pix.height, pix.width, pix.n)

    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    h = min(pix.height, height)
    w = min(pix.width, width)
    canvas[:h, :w, :3] = rendered[:h, :w, :3]
    canvas[:h, :w, 3] = 255
    if pix.width > width or pix.height > height:
        logger.debug(
            "Page %d (%dx%d) clipped to %dx%d canvas", page_number, pix.width, pix.height, width, height
        )
    return PageRaster(page_number=page_number, width=width, height=height, samples=canvas)


def rasterize_pdf(
    data: bytes,
    name: str = "<stream>",
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> List[PageRaster]:
    """Return one :class:`PageRaster` per page, ordered by page number.

    The first page that fails to render aborts the whole document with
    :class:`RenderFailure`.
    """

    if width <= 0 or height <= 0:
        raise ValueError(f"Raster dimensions must be positive, got {width}x{height}")

    rasters: List[PageRaster] = []
    with open_document(data, name) as doc:
        for index in range(doc.page_count):
            page_number = index + 1
            try:
                rasters.append(render_page(doc[index], page_number, width, height))
            except Exception as exc:
                logger.error("Rendering page %d of %s failed: %s", page_number, name, exc)
                raise RenderFailure(name, page_number, str(exc) or type(exc).__name__) from exc
    logger.debug("Rasterized %d page(s) of %s at %dx%d", len(rasters), name, width, height)
    return rasters
