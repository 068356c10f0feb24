"""Persist human-readable diff artifacts under a fixed output layout."""
from __future__ import annotations

import difflib
import json
import logging
from pathlib import Path
from typing import List, Mapping, Union

import fitz  # PyMuPDF

from .errors import ArtifactWriteFailure
from .extraction import mupdf_lock
from .types import PixelDiff, StageOutcome

logger = logging.getLogger(__name__)

DIFF_DIR = "diff"
TEXT_DIFF_NAME = "text-diff.txt"
META_DIFF_NAME = "meta-diff.json"
VISUAL_DIFF_TEMPLATE = "visual-diff-page-{page}.png"


def format_text_diff(base_text: str, compare_text: str) -> str:
    """Return only the deleted (``- ``) and inserted (``+ ``) lines.

    Within a changed group the deleted lines precede the inserted ones.
    Unchanged lines and blank lines are dropped.
    """

    base_lines = base_text.split("\n")
    compare_lines = compare_text.split("\n")
    matcher = difflib.SequenceMatcher(None, base_lines, compare_lines, autojunk=False)
    out: List[str] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        if tag in ("replace", "delete"):
            out.extend("- " + line for line in base_lines[i1:i2] if line.strip())
        if tag in ("replace", "insert"):
            out.extend("+ " + line for line in compare_lines[j1:j2] if line.strip())
    return "\n".join(out)


def dump_metadata(metadata: Mapping[str, object]) -> str:
    return json.dumps(dict(metadata), indent=2, sort_keys=True, ensure_ascii=False, default=str)


def format_metadata_diff(base_meta: Mapping[str, object], compare_meta: Mapping[str, object]) -> str:
    return (
        f"Base Metadata:\n{dump_metadata(base_meta)}\n\n"
        f"Compared Metadata:\n{dump_metadata(compare_meta)}"
    )


def encode_png(pixel_diff: PixelDiff) -> bytes:
    """Encode an RGBA diff bitmap as PNG bytes."""

    samples = pixel_diff.samples
    with mupdf_lock:
        pix = fitz.Pixmap(fitz.csRGB, pixel_diff.width, pixel_diff.height, samples.tobytes(), 1)
        return pix.tobytes("png")


class DiffWriter:
    """Writes diff artifacts to ``<output_root>/diff``.

    Every write creates missing parent directories and overwrites any
    previous artifact at the same path. Failures are returned inside a
    :class:`StageOutcome` instead of being raised.
    """

    def __init__(self, output_root: Union[str, Path] = ".") -> None:
        self.output_root = Path(output_root)
        self.diff_dir = self.output_root / DIFF_DIR

    @property
    def text_diff_path(self) -> Path:
        return self.diff_dir / TEXT_DIFF_NAME

    @property
    def meta_diff_path(self) -> Path:
        return self.diff_dir / META_DIFF_NAME

    def visual_diff_path(self, page_number: int) -> Path:
        return self.diff_dir / VISUAL_DIFF_TEMPLATE.format(page=page_number)

    def write_visual_diff(self, pixel_diff: PixelDiff) -> StageOutcome[Path]:
        path = self.visual_diff_path(pixel_diff.page_number)
        try:
            payload = encode_png(pixel_diff)
        except (RuntimeError, ValueError) as exc:
            return self._failed(path, exc)
        return self._write(path, payload)

    def write_text_diff(self, base_text: str, compare_text: str) -> StageOutcome[Path]:
        content = format_text_diff(base_text, compare_text)
        return self._write(self.text_diff_path, content.encode("utf-8"))

    def write_metadata_diff(
        self,
        base_meta: Mapping[str, object],
        compare_meta: Mapping[str, object],
    ) -> StageOutcome[Path]:
        if dict(base_meta) == dict(compare_meta):
            return StageOutcome.success(None)
        content = format_metadata_diff(base_meta, compare_meta)
        return self._write(self.meta_diff_path, content.encode("utf-8"))

    def _write(self, path: Path, payload: bytes) -> StageOutcome[Path]:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(payload)
        except OSError as exc:
            return self._failed(path, exc)
        logger.debug("Wrote %s (%d bytes)", path, len(payload))
        return StageOutcome.success(path)

    def _failed(self, path: Path, exc: Exception) -> StageOutcome[Path]:
        reason = getattr(exc, "strerror", None) or str(exc) or type(exc).__name__
        logger.error("Could not write %s: %s", path, reason)
        return StageOutcome.failure(ArtifactWriteFailure(path, reason))
