"""JSON reports for a finished comparison.

A report is the result mapping plus a ``summary`` block (which axes failed,
how many trailing pages of each document were left out of the visual
check) and, when given, the configuration the run used.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

from .presets import CompareConfig
from .types import ComparisonResult


def failed_axes(result: ComparisonResult) -> List[str]:
    axes = (
        ("text", result.text_match),
        ("metadata", result.meta_match),
        ("visual", result.visual_match),
    )
    return [name for name, match in axes if not match]


def build_report(
    result: ComparisonResult, config: Optional[CompareConfig] = None
) -> Dict[str, object]:
    summary: Dict[str, object] = {"failed_axes": [] if result.fatal else failed_axes(result)}
    if result.page_counts is not None:
        base_pages, compare_pages = result.page_counts
        summary["ignored_pages"] = {
            "base": base_pages - result.pages_compared,
            "compare": compare_pages - result.pages_compared,
        }
    report = result.to_dict()
    report["summary"] = summary
    if config is not None:
        report["config"] = config.to_dict()
    return report


def write_json_report(
    result: ComparisonResult, path: str | Path, config: Optional[CompareConfig] = None
) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(result_to_json(result, config) + "\n", encoding="utf-8")
    return out_path


def result_to_json(result: ComparisonResult, config: Optional[CompareConfig] = None) -> str:
    return json.dumps(build_report(result, config), ensure_ascii=False, indent=2)
