"""Data structures shared by the comparison stages."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Generic, List, Optional, Tuple, TypeVar, Union

import numpy as np

from .errors import ComparisonError

T = TypeVar("T")

DocumentMetadata = Dict[str, object]


@dataclass(frozen=True)
class DocumentPaths:
    """The ``(base, compare)`` pair of documents under comparison."""

    base: Path
    compare: Path

    @classmethod
    def of(cls, base: Union[str, Path], compare: Union[str, Path]) -> "DocumentPaths":
        return cls(base=Path(base), compare=Path(compare))


@dataclass(frozen=True)
class PageRaster:
    """A fixed-size RGBA rendering of one page.

    ``samples`` has shape ``(height, width, 4)`` and dtype ``uint8``.
    """

    page_number: int
    width: int
    height: int
    samples: np.ndarray = field(repr=False, compare=False)


@dataclass(frozen=True)
class PixelDiff:
    """Highlight bitmap for one compared page plus its differing-pixel count."""

    page_number: int
    width: int
    height: int
    samples: np.ndarray = field(repr=False, compare=False)
    diff_count: int = 0

    @property
    def matches(self) -> bool:
        return self.diff_count == 0


@dataclass(frozen=True)
class StageOutcome(Generic[T]):
    """Success-or-failure value returned by each comparison stage."""

    value: Optional[T] = None
    error: Optional[ComparisonError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "StageOutcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ComparisonError) -> "StageOutcome[T]":
        return cls(error=error)


@dataclass
class ComparisonResult:
    """Three-axis verdict of a comparison and the artifacts written for it."""

    text_match: bool
    meta_match: bool
    visual_match: bool
    text_diff_path: Optional[Path] = None
    meta_diff_path: Optional[Path] = None
    diff_image_paths: Optional[List[Path]] = None
    error: Optional[str] = None
    pages_compared: int = 0
    page_counts: Optional[Tuple[int, int]] = None
    fatal: bool = False

    @property
    def passed(self) -> bool:
        return self.text_match and self.meta_match and self.visual_match

    @classmethod
    def failure(cls, error: Union[str, BaseException]) -> "ComparisonResult":
        message = error if isinstance(error, str) else (str(error) or type(error).__name__)
        return cls(
            text_match=False, meta_match=False, visual_match=False, error=message, fatal=True
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "pass": self.passed,
            "text_match": self.text_match,
            "meta_match": self.meta_match,
            "visual_match": self.visual_match,
            "text_diff_path": _path_str(self.text_diff_path),
            "meta_diff_path": _path_str(self.meta_diff_path),
            "diff_image_paths": (
                None if self.diff_image_paths is None else [str(p) for p in self.diff_image_paths]
            ),
            "error": self.error,
            "pages_compared": self.pages_compared,
            "page_counts": list(self.page_counts) if self.page_counts else None,
            "fatal": self.fatal,
        }

    def __str__(self) -> str:
        if self.fatal:
            return f"ComparisonResult(pass=False, error='{self.error}')"
        return (
            f"ComparisonResult(pass={self.passed}, text={self.text_match}, "
            f"meta={self.meta_match}, visual={self.visual_match})"
        )


def _path_str(path: Optional[Path]) -> Optional[str]:
    return None if path is None else str(path)
