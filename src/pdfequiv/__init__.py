"""PDF equivalence checking across text, metadata and rendered pages."""

from __future__ import annotations

from .compare import PDFComparator, compare_pdfs, compare_pdfs_async
from .errors import (
    ArtifactWriteFailure,
    ComparisonError,
    DimensionMismatch,
    RenderFailure,
    UnreadablePDF,
)
from .presets import CompareConfig, config_from_env, get_preset, iter_presets
from .types import ComparisonResult, DocumentPaths, PageRaster, PixelDiff

__all__ = [
    "compare_pdfs",
    "compare_pdfs_async",
    "PDFComparator",
    "CompareConfig",
    "config_from_env",
    "get_preset",
    "iter_presets",
    "ComparisonResult",
    "DocumentPaths",
    "PageRaster",
    "PixelDiff",
    "ComparisonError",
    "UnreadablePDF",
    "RenderFailure",
    "DimensionMismatch",
    "ArtifactWriteFailure",
]

__version__ = "0.1.0"
