"""Comparison configuration, presets and color helpers."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Mapping, Optional, Tuple

Color = Tuple[int, int, int]

ENV_PREFIX = "PDFEQUIV_"


@dataclass(frozen=True)
class CompareConfig:
    """Parameters driving rasterization and visual comparison."""

    raster_width: int = 1000
    raster_height: int = 1414
    pixel_threshold: float = 0.1
    highlight_color: Color = (255, 0, 0)

    def validate(self) -> "CompareConfig":
        if self.raster_width <= 0 or self.raster_height <= 0:
            raise ValueError(
                f"Raster dimensions must be positive, got {self.raster_width}x{self.raster_height}"
            )
        if not 0.0 <= self.pixel_threshold <= 1.0:
            raise ValueError(f"Pixel threshold must be within [0, 1], got {self.pixel_threshold}")
        _check_color(self.highlight_color)
        return self

    def to_dict(self) -> Dict[str, object]:
        return {
            "raster_width": self.raster_width,
            "raster_height": self.raster_height,
            "pixel_threshold": self.pixel_threshold,
            "highlight_color": list(self.highlight_color),
        }

    def copy(self, **overrides: object) -> "CompareConfig":
        return replace(self, **overrides)


@dataclass(frozen=True)
class Preset:
    """Named configuration bundle."""

    name: str
    description: str
    config: CompareConfig


PRESETS: Mapping[str, Preset] = {
    "default": Preset(
        name="default",
        description="A4-sized canvas with a small anti-aliasing tolerance.",
        config=CompareConfig(),
    ),
    "strict": Preset(
        name="strict",
        description="Any pixel change at all counts as a difference.",
        config=CompareConfig(pixel_threshold=0.0),
    ),
    "tolerant": Preset(
        name="tolerant",
        description="Ignores faint color shifts such as font hinting changes.",
        config=CompareConfig(pixel_threshold=0.2),
    ),
}


def get_preset(name: str) -> Preset:
    key = name.strip().lower()
    try:
        return PRESETS[key]
    except KeyError as exc:
        known = ", ".join(sorted(PRESETS))
        raise KeyError(f"Unknown preset '{name}'. Known presets: {known}") from exc


def iter_presets() -> Iterable[Preset]:
    return PRESETS.values()


def parse_color(value: str) -> Color:
    """Parse an ``r,g,b`` string into an integer RGB triple."""

    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 3:
        raise ValueError(f"Color '{value}' must have three components")
    try:
        color = tuple(int(part) for part in parts)
    except ValueError as exc:
        raise ValueError(f"Color '{value}' has non-integer components") from exc
    return _check_color(color)  # type: ignore[arg-type]


def _check_color(color: Tuple[int, ...]) -> Color:
    if len(color) != 3 or any(not 0 <= channel <= 255 for channel in color):
        raise ValueError(f"Color {tuple(color)} must be three channels within 0-255")
    return (int(color[0]), int(color[1]), int(color[2]))


def config_from_env(
    base: Optional[CompareConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CompareConfig:
    """Return ``base`` with overrides taken from ``PDFEQUIV_*`` variables.

    Recognised variables are ``PDFEQUIV_RASTER_WIDTH``,
    ``PDFEQUIV_RASTER_HEIGHT``, ``PDFEQUIV_PIXEL_THRESHOLD`` and
    ``PDFEQUIV_HIGHLIGHT_COLOR`` (``r,g,b``). Empty values are ignored.
    """

    env = os.environ if environ is None else environ
    config = base or CompareConfig()
    overrides: Dict[str, object] = {}
    for field_name, convert in (
        ("raster_width", int),
        ("raster_height", int),
        ("pixel_threshold", float),
        ("highlight_color", parse_color),
    ):
        raw = env.get(ENV_PREFIX + field_name.upper(), "").strip()
        if not raw:
            continue
        try:
            overrides[field_name] = convert(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid {ENV_PREFIX}{field_name.upper()}: {exc}") from exc
    return config.copy(**overrides).validate()
