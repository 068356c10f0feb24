"""Command line interface for pdfequiv."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Optional

from dotenv import find_dotenv, load_dotenv

from .compare import compare_pdfs
from .presets import CompareConfig, config_from_env, get_preset, parse_color
from .report import write_json_report

EXIT_EQUIVALENT = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdfequiv",
        description="Check two PDFs for equivalent text, metadata and rendered pages.",
    )
    parser.add_argument("--base", help="Path to the reference PDF")
    parser.add_argument("--compare", help="Path to the candidate PDF")
    parser.add_argument(
        "--output-root",
        default=".",
        help="Directory receiving the diff/ artifacts (default: current directory)",
    )
    parser.add_argument("--preset", default="default", help="Preset name (default|strict|tolerant)")
    parser.add_argument("--width", type=int, help="Raster canvas width in pixels")
    parser.add_argument("--height", type=int, help="Raster canvas height in pixels")
    parser.add_argument("--threshold", type=float, help="Per-pixel color distance threshold (0-1)")
    parser.add_argument("--highlight-color", help="Diff highlight color as r,g,b")
    parser.add_argument("--json", help="Write the comparison result as JSON to this path")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__

        print(__version__)
        return EXIT_EQUIVALENT

    if not args.base or not args.compare:
        parser.error("--base and --compare are required")
        return EXIT_ERROR

    load_dotenv(find_dotenv(usecwd=True))
    _configure_logging(args)

    try:
        config = _build_config(args)
    except (KeyError, ValueError) as exc:
        parser.error(str(exc).strip("'\""))
        return EXIT_ERROR

    result = compare_pdfs(args.base, args.compare, config=config, output_root=args.output_root)

    if args.json:
        write_json_report(result, args.json, config)

    if result.passed:
        print("PASS: documents are equivalent")
        return EXIT_EQUIVALENT
    if result.fatal:
        print(f"ERROR: {result.error}")
        return EXIT_ERROR
    print(
        "FAIL: text={} metadata={} visual={}".format(
            _verdict(result.text_match), _verdict(result.meta_match), _verdict(result.visual_match)
        )
    )
    return EXIT_DIFFERENT


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _build_config(args: argparse.Namespace) -> CompareConfig:
    config = config_from_env(get_preset(args.preset).config)
    overrides = {}
    for field_name, arg_name in (
        ("raster_width", "width"),
        ("raster_height", "height"),
        ("pixel_threshold", "threshold"),
    ):
        value = getattr(args, arg_name)
        if value is not None:
            overrides[field_name] = value
    if args.highlight_color:
        overrides["highlight_color"] = parse_color(args.highlight_color)
    return config.copy(**overrides).validate()


def _verdict(match: bool) -> str:
    return "ok" if match else "differs"


if __name__ == "__main__":
    sys.exit(main())
