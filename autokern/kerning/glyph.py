"""Glyph bitmaps and their coordinate conventions.

A Glyph is one character rendered at a fixed font size:

- Vertically the bitmap spans the font's full em box (ascender to
  descender), so all glyphs of a font share one height and one baseline and
  any two of them can be compared row by row.
- Horizontally it spans the glyph's ink bounds plus a fixed padding on both
  sides, leaving room for the blur to spread.
- bearing_offset is the x position of the glyph origin inside the bitmap
  (padding - bbox.left). The overlap metric positions glyphs with it.
- coverage holds ink density in [0, 1], 1 = fully inked.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from autokern.data.font import Font

from .config import DEFAULT_KERNING_CONFIG, KerningConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Glyph:
    """A rendered glyph: coverage grid plus horizontal metrics in pixels."""

    char: str
    width: int
    height: int
    advance_width: float
    bearing_offset: float
    coverage: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        coverage = np.array(self.coverage, dtype=np.float32)
        if coverage.shape != (self.height, self.width):
            raise ValueError(
                f"Coverage shape {coverage.shape} does not match "
                f"glyph size {(self.height, self.width)} for {self.char!r}"
            )
        coverage.setflags(write=False)
        object.__setattr__(self, "coverage", coverage)

    @classmethod
    def from_coverage(
        cls,
        char: str,
        coverage: np.ndarray,
        advance_width: Optional[float] = None,
        bearing_offset: float = 0.0,
    ) -> "Glyph":
        """Build a glyph directly from a grid; advance defaults to the grid width."""
        grid = np.asarray(coverage, dtype=np.float32)
        height, width = grid.shape
        return cls(
            char=char,
            width=width,
            height=height,
            advance_width=float(width if advance_width is None else advance_width),
            bearing_offset=float(bearing_offset),
            coverage=grid,
        )


def coverage_from_luminance(luminance: np.ndarray, max_luminance: float = 255.0) -> np.ndarray:
    """Invert a black-on-white raster into [0, 1] coverage (ink = 1)."""
    coverage = 1.0 - np.asarray(luminance, dtype=np.float32) / max_luminance
    return np.clip(coverage, 0.0, 1.0).astype(np.float32)


def coverage_stats(coverage: np.ndarray) -> dict:
    """Summary statistics of a coverage grid, for debug logging."""
    grid = np.asarray(coverage)
    return {
        "min": float(grid.min()),
        "max": float(grid.max()),
        "mean": float(grid.mean()),
        "inked": int((grid > 0.001).sum()),
    }


def render_glyph(
    font: Font,
    char: str,
    config: Optional[KerningConfig] = None,
    font_size: Optional[int] = None,
) -> Glyph:
    """
    Render a character into a baseline-aligned coverage bitmap.

    Args:
        font: Font to render from.
        char: Single character.
        config: Kerning configuration (padding, default font size).
        font_size: Pixels per em; defaults to config.font_size.

    Returns:
        Glyph with em-box height and padded ink-box width.
    """
    config = config or DEFAULT_KERNING_CONFIG
    font_size = font_size or config.font_size

    metrics = font.em_metrics()
    height = max(1, math.ceil(metrics.em_height * font_size / metrics.units_per_em))
    baseline = metrics.ascender * font_size / metrics.units_per_em

    bbox = font.bounding_box(char, font_size)
    glyph_width = math.ceil(bbox.width)
    if glyph_width <= 0:
        glyph_width = 1

    width = glyph_width + 2 * config.padding
    bearing_offset = config.padding - bbox.left

    luminance = font.rasterize(char, font_size, (width, height), (bearing_offset, baseline))
    glyph = Glyph(
        char=char,
        width=width,
        height=height,
        advance_width=font.advance_width(char, font_size),
        bearing_offset=bearing_offset,
        coverage=coverage_from_luminance(luminance),
    )

    logger.debug(f"Rendered {char!r}: {width}x{height}, bearing={bearing_offset:.2f}, "
                 f"advance={glyph.advance_width:.2f}, stats={coverage_stats(glyph.coverage)}")
    return glyph
