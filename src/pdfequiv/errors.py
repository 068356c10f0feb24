"""Custom exceptions used across pdfequiv."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

__all__ = [
    "ComparisonError",
    "UnreadablePDF",
    "RenderFailure",
    "DimensionMismatch",
    "ArtifactWriteFailure",
]

PathLike = Union[str, Path]


class ComparisonError(Exception):
    """Base exception for all comparison errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "PDF comparison failed."


class UnreadablePDF(ComparisonError):
    """Raised when a file is missing, unreadable or not a valid PDF."""

    def __init__(self, path: Optional[PathLike] = None, reason: str = "") -> None:
        self.path = str(path) if path is not None else None
        message = ""
        if self.path:
            message = f"Unreadable PDF '{self.path}'"
            if reason:
                message += f": {reason}"
        super().__init__(message)

    @property
    def default_message(self) -> str:
        return "Unreadable or corrupted PDF file."


class RenderFailure(ComparisonError):
    """Raised when a page cannot be rasterized."""

    def __init__(
        self,
        path: Optional[PathLike] = None,
        page_number: Optional[int] = None,
        reason: str = "",
    ) -> None:
        self.path = str(path) if path is not None else None
        self.page_number = page_number
        message = ""
        if self.path and page_number is not None:
            message = f"Failed to render page {page_number} of '{self.path}'"
            if reason:
                message += f": {reason}"
        super().__init__(message)

    @property
    def default_message(self) -> str:
        return "Failed to render PDF page."


class DimensionMismatch(ComparisonError):
    """Raised when two rasters of different sizes are compared."""

    def __init__(
        self,
        base_shape: Optional[Sequence[int]] = None,
        compare_shape: Optional[Sequence[int]] = None,
    ) -> None:
        self.base_shape = tuple(base_shape) if base_shape is not None else None
        self.compare_shape = tuple(compare_shape) if compare_shape is not None else None
        message = ""
        if self.base_shape and self.compare_shape:
            message = (
                f"Raster sizes do not match: {_shape_label(self.base_shape)} "
                f"vs {_shape_label(self.compare_shape)}"
            )
        super().__init__(message)

    @property
    def default_message(self) -> str:
        return "Raster sizes do not match."


class ArtifactWriteFailure(ComparisonError):
    """Raised when a diff artifact cannot be written.

    The comparator reports it in the result error instead of failing the run.
    """

    def __init__(self, path: Optional[PathLike] = None, reason: str = "") -> None:
        self.path = str(path) if path is not None else None
        message = ""
        if self.path:
            message = f"Could not write diff artifact '{self.path}'"
            if reason:
                message += f": {reason}"
        super().__init__(message)

    @property
    def default_message(self) -> str:
        return "Could not write diff artifact."


def _shape_label(shape: Sequence[int]) -> str:
    # (height, width, ...) -> "WxH"
    if len(shape) >= 2:
        return f"{shape[1]}x{shape[0]}"
    return "x".join(str(v) for v in shape)
