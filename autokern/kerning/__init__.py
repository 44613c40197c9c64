"""
Overlap-based kerning estimation.

Renders glyph pairs, blurs them into ink-density fields and searches for the
horizontal offset whose overlap matches the font's own letter spacing.

Main components:
- Glyph / render_glyph: baseline-aligned coverage bitmaps
- gaussian_blur / KernelCache: separable blur with shared kernels
- overlap: overlap energy of two glyphs at a trial kern
- calibrate: per-font blur width and overlap band
- kern_pair / SelectionStrategy: kern search over the overlap curve
- generate_kerning_table: full tables, JSON output and the autokern CLI

Example usage:
    from autokern.data import load_font
    from autokern.kerning import calibrate, estimate_kern, kern_to_percent

    with load_font("Roboto-Black.ttf") as font:
        calibration = calibrate(font)
        kern_px = estimate_kern("A", "V", font, calibration)
        print(kern_to_percent(kern_px, font.advance_width("A", 100)))
"""

from .blur import KernelCache, blur_glyph, gaussian_blur, gaussian_kernel, round_half_up
from .calibrate import CalibrationFailed, CalibrationResult, calibrate, find_overlap_bounds
from .config import (
    COMMON_PAIRS,
    DEFAULT_KERNING_CONFIG,
    KerningConfig,
    SelectionStrategy,
    validate_config,
)
from .generate import (
    KerningTableResult,
    estimate_kern,
    format_table,
    generate_kerning_table,
    get_kerning_table,
    kern_to_percent,
    load_kerning_table,
    parse_pairs,
    write_kerning_table,
)
from .glyph import Glyph, coverage_from_luminance, render_glyph
from .overlap import overlap, placement_offset
from .search import CALIBRATION_BOUNDS, OverlapSample, kern_pair, max_overlap_kern, sample_overlaps

__all__ = [
    # Config
    "KerningConfig",
    "SelectionStrategy",
    "DEFAULT_KERNING_CONFIG",
    "COMMON_PAIRS",
    "validate_config",
    # Glyphs and blur
    "Glyph",
    "render_glyph",
    "coverage_from_luminance",
    "KernelCache",
    "gaussian_kernel",
    "gaussian_blur",
    "blur_glyph",
    "round_half_up",
    # Overlap and search
    "overlap",
    "placement_offset",
    "OverlapSample",
    "CALIBRATION_BOUNDS",
    "sample_overlaps",
    "max_overlap_kern",
    "kern_pair",
    # Calibration
    "CalibrationResult",
    "CalibrationFailed",
    "find_overlap_bounds",
    "calibrate",
    # Tables
    "KerningTableResult",
    "estimate_kern",
    "kern_to_percent",
    "parse_pairs",
    "generate_kerning_table",
    "get_kerning_table",
    "write_kerning_table",
    "load_kerning_table",
    "format_table",
]
