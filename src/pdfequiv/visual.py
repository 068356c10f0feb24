"""Pixel-level comparison of page rasters.

Pixels are compared with the YIQ perceptual color metric used by
pixelmatch: each RGBA pixel is blended onto white according to its alpha,
converted to YIQ and the weighted squared distance of the two pixels is
compared against ``35215 * threshold ** 2``. ``35215`` is the largest
possible YIQ delta, so a threshold of ``1.0`` accepts every pixel and
``0.0`` rejects any change at all.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatch
from .presets import Color, CompareConfig
from .types import PageRaster, PixelDiff

logger = logging.getLogger(__name__)

MAX_YIQ_DELTA = 35215.0


@dataclass(frozen=True)
class VisualComparison:
    """Document-level outcome of comparing two raster lists."""

    visual_match: bool
    pages_compared: int
    mismatches: List[PixelDiff] = field(default_factory=list)


def max_delta(threshold: float) -> float:
    return MAX_YIQ_DELTA * threshold * threshold


def _blend_on_white(rgba: np.ndarray) -> np.ndarray:
    pixels = rgba.astype(np.float64)
    alpha = pixels[..., 3:4] / 255.0
    return 255.0 + (pixels[..., :3] - 255.0) * alpha


def _yiq(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    y = r * 0.29889531 + g * 0.58662247 + b * 0.11448223
    i = r * 0.59597799 - g * 0.27417610 - b * 0.32180189
    q = r * 0.21147017 - g * 0.52261711 + b * 0.31114694
    return y, i, q


def color_delta(base: np.ndarray, compare: np.ndarray) -> np.ndarray:
    """Return the squared YIQ distance between two RGBA arrays, per pixel."""

    y1, i1, q1 = _yiq(_blend_on_white(base))
    y2, i2, q2 = _yiq(_blend_on_white(compare))
    dy = y1 - y2
    di = i1 - i2
    dq = q1 - q2
    return 0.5053 * dy * dy + 0.299 * di * di + 0.1957 * dq * dq


def diff_rasters(
    base: PageRaster,
    compare: PageRaster,
    threshold: float = 0.1,
    highlight_color: Color = (255, 0, 0),
) -> PixelDiff:
    """Compare two equally sized rasters and build the highlight bitmap.

    A pixel counts as different only when its distance is strictly greater
    than ``max_delta(threshold)``. The comparison is exact against that
    value; a threshold recovered from a known delta by a square root can be
    off by one float step, so it may land on either side of the boundary.
    Differing pixels are painted opaque ``highlight_color``; every other
    pixel is transparent black.
    """

    if base.samples.shape != compare.samples.shape:
        raise DimensionMismatch(base.samples.shape, compare.samples.shape)
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"Pixel threshold must be within [0, 1], got {threshold}")

    mask = color_delta(base.samples, compare.samples) > max_delta(threshold)
    diff = np.zeros_like(base.samples, dtype=np.uint8)
    diff[mask] = (*highlight_color, 255)
    return PixelDiff(
        page_number=base.page_number,
        width=base.width,
        height=base.height,
        samples=diff,
        diff_count=int(np.count_nonzero(mask)),
    )


def common_page_count(
    base_rasters: Sequence[PageRaster],
    compare_rasters: Sequence[PageRaster],
) -> int:
    """Number of pages compared; extra pages of the longer document are ignored."""

    pages = min(len(base_rasters), len(compare_rasters))
    if len(base_rasters) != len(compare_rasters):
        logger.info(
            "Page counts differ (%d vs %d); comparing the first %d page(s)",
            len(base_rasters),
            len(compare_rasters),
            pages,
        )
    return pages


def summarize(pixel_diffs: Sequence[PixelDiff], pages_compared: int) -> VisualComparison:
    mismatches = [d for d in pixel_diffs if not d.matches]
    for pixel_diff in mismatches:
        logger.warning(
            "Visual difference on page %d (%d pixel(s))",
            pixel_diff.page_number,
            pixel_diff.diff_count,
        )
    return VisualComparison(
        visual_match=not mismatches, pages_compared=pages_compared, mismatches=mismatches
    )


def compare_documents(
    base_rasters: Sequence[PageRaster],
    compare_rasters: Sequence[PageRaster],
    config: CompareConfig,
) -> VisualComparison:
    """Compare the common pages of two documents in page order."""

    pages = common_page_count(base_rasters, compare_rasters)
    diffs: List[PixelDiff] = [
        diff_rasters(
            base_rasters[index],
            compare_rasters[index],
            threshold=config.pixel_threshold,
            highlight_color=config.highlight_color,
        )
        for index in range(pages)
    ]
    return summarize(diffs, pages)
