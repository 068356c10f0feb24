"""Three-axis PDF equivalence check: text, metadata and rendered pages.

:class:`PDFComparator` runs the comparison as four stages (extract,
rasterize, visual compare, merge). Each stage returns a
:class:`~pdfequiv.types.StageOutcome`; a failed stage short-circuits the
run into a failure result so no exception reaches the caller. Blocking work
runs in worker threads, independent branches are awaited together.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, List, Optional, TypeVar, Union

from .errors import ComparisonError
from .extraction import extract_metadata, extract_text, read_pdf_bytes
from .presets import CompareConfig
from .rasterize import rasterize_pdf
from .types import (
    ComparisonResult,
    DocumentMetadata,
    DocumentPaths,
    PageRaster,
    StageOutcome,
)
from .visual import VisualComparison, compare_documents
from .writer import DiffWriter

logger = logging.getLogger(__name__)

T = TypeVar("T")
PathLike = Union[str, Path]


@dataclass(frozen=True)
class Extraction:
    base_data: bytes
    compare_data: bytes
    base_text: str
    compare_text: str
    base_meta: DocumentMetadata
    compare_meta: DocumentMetadata

    @property
    def text_match(self) -> bool:
        return self.base_text == self.compare_text

    @property
    def meta_match(self) -> bool:
        return self.base_meta == self.compare_meta


@dataclass(frozen=True)
class Rasters:
    base: List[PageRaster]
    compare: List[PageRaster]


async def _guard(awaitable: Awaitable[T]) -> StageOutcome[T]:
    try:
        return StageOutcome.success(await awaitable)
    except ComparisonError as exc:
        return StageOutcome.failure(exc)


class PDFComparator:
    """Compare a base PDF against a candidate PDF."""

    def __init__(
        self,
        paths: DocumentPaths,
        config: Optional[CompareConfig] = None,
        output_root: PathLike = ".",
    ) -> None:
        self.paths = paths
        self.config = config or CompareConfig()
        self.writer = DiffWriter(output_root)

    async def run(self) -> ComparisonResult:
        try:
            return await self._run()
        except Exception as exc:
            logger.exception("Unexpected error comparing %s and %s", self.paths.base, self.paths.compare)
            return ComparisonResult.failure(exc)

    async def _run(self) -> ComparisonResult:
        self.config.validate()
        base_name, compare_name = str(self.paths.base), str(self.paths.compare)
        logger.info("Comparing %s against %s", compare_name, base_name)

        extracted = await self.extract()
        if not extracted.ok:
            return self._fatal(extracted.error)
        extraction = extracted.value

        rastered = await self.rasterize(extraction)
        if not rastered.ok:
            return self._fatal(rastered.error)
        rasters = rastered.value

        compared = await self.compare_visuals(rasters)
        if not compared.ok:
            return self._fatal(compared.error)

        result = await self.merge(extraction, compared.value)
        result.page_counts = (len(rasters.base), len(rasters.compare))
        return result

    async def extract(self) -> StageOutcome[Extraction]:
        """Read both files, then run the four extraction operations together."""

        async def _extract() -> Extraction:
            base_name, compare_name = str(self.paths.base), str(self.paths.compare)
            base_data, compare_data = await asyncio.gather(
                asyncio.to_thread(read_pdf_bytes, self.paths.base),
                asyncio.to_thread(read_pdf_bytes, self.paths.compare),
            )
            base_text, compare_text, base_meta, compare_meta = await asyncio.gather(
                asyncio.to_thread(extract_text, base_data, base_name),
                asyncio.to_thread(extract_text, compare_data, compare_name),
                asyncio.to_thread(extract_metadata, base_data, base_name),
                asyncio.to_thread(extract_metadata, compare_data, compare_name),
            )
            return Extraction(base_data, compare_data, base_text, compare_text, base_meta, compare_meta)

        return await _guard(_extract())

    async def rasterize(self, extraction: Extraction) -> StageOutcome[Rasters]:
        width, height = self.config.raster_width, self.config.raster_height

        async def _rasterize() -> Rasters:
            base, compare = await asyncio.gather(
                asyncio.to_thread(
                    rasterize_pdf, extraction.base_data, str(self.paths.base), width, height
                ),
                asyncio.to_thread(
                    rasterize_pdf, extraction.compare_data, str(self.paths.compare), width, height
                ),
            )
            return Rasters(base=base, compare=compare)

        return await _guard(_rasterize())

    async def compare_visuals(self, rasters: Rasters) -> StageOutcome[VisualComparison]:
        """Diff every common page; results keep page order."""

        return await _guard(
            asyncio.to_thread(compare_documents, rasters.base, rasters.compare, self.config)
        )

    async def merge(self, extraction: Extraction, visual: VisualComparison) -> ComparisonResult:
        """Build the result and write an artifact for every failing axis."""

        result = ComparisonResult(
            text_match=extraction.text_match,
            meta_match=extraction.meta_match,
            visual_match=visual.visual_match,
            pages_compared=visual.pages_compared,
        )
        errors: List[str] = []

        if not result.text_match:
            logger.warning("Text differs between the PDF files.")
            outcome = await asyncio.to_thread(
                self.writer.write_text_diff, extraction.base_text, extraction.compare_text
            )
            result.text_diff_path = self._collect(outcome, errors)

        if not result.meta_match:
            logger.warning("Metadata differs between the PDF files.")
            outcome = await asyncio.to_thread(
                self.writer.write_metadata_diff, extraction.base_meta, extraction.compare_meta
            )
            result.meta_diff_path = self._collect(outcome, errors)

        if not result.visual_match:
            outcomes = await asyncio.gather(
                *(asyncio.to_thread(self.writer.write_visual_diff, d) for d in visual.mismatches)
            )
            paths = [self._collect(outcome, errors) for outcome in outcomes]
            result.diff_image_paths = [p for p in paths if p is not None]
            for path in result.diff_image_paths:
                logger.info("Visual diff written to %s", path)

        if errors:
            result.error = "; ".join(errors)
        logger.info("Comparison finished: %s", result)
        return result

    @staticmethod
    def _collect(outcome: StageOutcome[Path], errors: List[str]) -> Optional[Path]:
        if outcome.ok:
            return outcome.value
        errors.append(str(outcome.error))
        return None

    def _fatal(self, error: Optional[ComparisonError]) -> ComparisonResult:
        logger.error("PDF comparison failed: %s", error)
        return ComparisonResult.failure(error or ComparisonError())


async def compare_pdfs_async(
    base: PathLike,
    compare: PathLike,
    *,
    config: Optional[CompareConfig] = None,
    output_root: PathLike = ".",
) -> ComparisonResult:
    comparator = PDFComparator(DocumentPaths.of(base, compare), config=config, output_root=output_root)
    return await comparator.run()


def compare_pdfs(
    base: PathLike,
    compare: PathLike,
    *,
    config: Optional[CompareConfig] = None,
    output_root: PathLike = ".",
) -> ComparisonResult:
    """Compare ``compare`` against ``base`` and return the three-axis verdict.

    Diff artifacts for failing axes are written below ``output_root/diff``.
    Use :func:`compare_pdfs_async` when already inside an event loop.
    """

    return asyncio.run(
        compare_pdfs_async(base, compare, config=config, output_root=output_root)
    )
