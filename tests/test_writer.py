import fitz
import numpy as np

from pdfequiv.errors import ArtifactWriteFailure
from pdfequiv.types import PixelDiff
from pdfequiv.writer import DiffWriter, format_metadata_diff, format_text_diff


def _pixel_diff(page_number=1, width=4, height=3):
    samples = np.zeros((height, width, 4), dtype=np.uint8)
    samples[1, 2] = (255, 0, 0, 255)
    return PixelDiff(page_number, width, height, samples, diff_count=1)


def test_text_diff_keeps_only_changed_lines():
    assert format_text_diff("a\nb\nc", "a\nx\nc") == "- b\n+ x"


def test_text_diff_single_normalized_line():
    assert format_text_diff("Hello world", "Hello there") == "- Hello world\n+ Hello there"


def test_text_diff_drops_blank_lines():
    assert format_text_diff("a", "a\n\n   \nb") == "+ b"


def test_text_diff_identical_is_empty():
    assert format_text_diff("same", "same") == ""


def test_metadata_diff_layout_is_stable():
    content = format_metadata_diff({"title": "A", "author": "x"}, {"author": "x", "title": "B"})

    base, compared = content.split("\n\nCompared Metadata:\n")
    assert base.startswith("Base Metadata:\n{\n")
    assert '"title": "A"' in base
    assert '"title": "B"' in compared
    # keys sorted, so the two dumps line up
    assert base.index('"author"') < base.index('"title"')


def test_write_text_diff(tmp_path):
    writer = DiffWriter(tmp_path)

    outcome = writer.write_text_diff("one", "two")

    assert outcome.ok
    assert outcome.value == tmp_path / "diff" / "text-diff.txt"
    assert outcome.value.read_text(encoding="utf-8") == "- one\n+ two"


def test_write_metadata_diff_noop_when_equal(tmp_path):
    writer = DiffWriter(tmp_path)

    outcome = writer.write_metadata_diff({"b": 1, "a": 2}, {"a": 2, "b": 1})

    assert outcome.ok
    assert outcome.value is None
    assert not writer.meta_diff_path.exists()


def test_write_metadata_diff(tmp_path):
    writer = DiffWriter(tmp_path)

    outcome = writer.write_metadata_diff({"title": "Old"}, {"title": "New"})

    assert outcome.value == tmp_path / "diff" / "meta-diff.json"
    content = outcome.value.read_text(encoding="utf-8")
    assert "Old" in content and "New" in content


def test_write_visual_diff_png(tmp_path):
    writer = DiffWriter(tmp_path)

    outcome = writer.write_visual_diff(_pixel_diff(page_number=3))

    assert outcome.value == tmp_path / "diff" / "visual-diff-page-3.png"
    payload = outcome.value.read_bytes()
    assert payload.startswith(b"\x89PNG")
    pix = fitz.Pixmap(str(outcome.value))
    assert (pix.width, pix.height) == (4, 3)


def test_writes_are_idempotent(tmp_path):
    writer = DiffWriter(tmp_path)

    first = writer.write_visual_diff(_pixel_diff()).value.read_bytes()
    second = writer.write_visual_diff(_pixel_diff()).value.read_bytes()
    writer.write_text_diff("a", "b")
    writer.write_text_diff("a", "b")

    assert first == second
    assert sorted(p.name for p in (tmp_path / "diff").iterdir()) == [
        "text-diff.txt",
        "visual-diff-page-1.png",
    ]


def test_write_failure_is_returned_not_raised(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    writer = DiffWriter(blocker)

    outcome = writer.write_text_diff("a", "b")

    assert not outcome.ok
    assert outcome.value is None
    assert isinstance(outcome.error, ArtifactWriteFailure)
    assert "text-diff.txt" in str(outcome.error)
