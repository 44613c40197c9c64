"""Per-font calibration of the blur width.

Wide letters ("o") naturally produce more overlap than narrow ones ("l")
just because they hold more ink. Calibration widens the blur until the
self-overlap of the tuning characters is balanced, i.e. the smallest
self-overlap is more than half of the largest:

    kernel_width = round(0.2 * font_size), forced odd
    repeat:
        s_c = overlap(blur(c), blur(c), kern=0) for c in "lno"
        if min(s) > max(s) / 2: converged
        kernel_width += 2
        if kernel_width > 2 * font_size: failed

The resulting (min_overlap, max_overlap, kernel_width) is computed once per
font and reused for every pair.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from autokern.data.font import Font

from .blur import KernelCache, blur_glyph, round_half_up
from .config import DEFAULT_KERNING_CONFIG, KerningConfig
from .glyph import render_glyph
from .overlap import overlap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationResult:
    """Self-overlap bounds of the tuning glyphs and the blur width behind them."""

    min_overlap: float
    max_overlap: float
    kernel_width: int
    converged: bool = True
    iterations: int = 1

    @property
    def ratio(self) -> float:
        return self.min_overlap / self.max_overlap if self.max_overlap > 0 else 0.0


class CalibrationFailed(Exception):
    """No blur width balances the tuning glyphs within the kernel width ceiling."""

    def __init__(self, message: str, result: Optional[CalibrationResult] = None) -> None:
        super().__init__(message)
        self.result = result


def find_overlap_bounds(
    font: Font,
    config: Optional[KerningConfig] = None,
    font_size: Optional[int] = None,
    cache: Optional[KernelCache] = None,
) -> CalibrationResult:
    """
    Search for the kernel width that balances the tuning glyphs.

    Args:
        font: Font to calibrate.
        config: Kerning configuration (tuning chars, padding, font size).
        font_size: Pixels per em; defaults to config.font_size.
        cache: Optional shared blur kernel cache.

    Returns:
        CalibrationResult; converged is False when the kernel width ceiling
        (2 * font_size) was exceeded, in which case the bounds and width are
        those of the last iteration.

    Raises:
        CalibrationFailed: If the font lacks one of the tuning characters.
    """
    config = config or DEFAULT_KERNING_CONFIG
    font_size = font_size or config.font_size

    missing = [c for c in config.tuning_chars if not font.has_glyph(c)]
    if missing:
        raise CalibrationFailed(f"Font {font.name} lacks tuning characters {''.join(missing)!r}")

    glyphs = [render_glyph(font, c, config, font_size) for c in config.tuning_chars]
    cache = cache or KernelCache()

    kernel_width = round_half_up(0.2 * font_size)
    if kernel_width % 2 == 0:
        kernel_width += 1

    iteration = 0
    while True:
        iteration += 1
        ss = []
        for glyph in glyphs:
            blurred = blur_glyph(glyph, kernel_width, config.blur_factor, cache)
            ss.append(overlap(blurred, blurred, 0))

        min_s, max_s = min(ss), max(ss)
        logger.debug(f"Calibration iteration {iteration}: kernel_width={kernel_width}, "
                     f"min_s={min_s:.2f}, max_s={max_s:.2f}")

        if min_s > max_s / 2:
            logger.info(f"Calibration converged: kernel_width={kernel_width}, "
                        f"min_s={min_s:.2f}, max_s={max_s:.2f}")
            return CalibrationResult(min_s, max_s, kernel_width, True, iteration)

        if kernel_width + 2 > 2 * font_size:
            logger.warning(f"Failed to find a reasonable kernel width "
                           f"(exceeded {2 * font_size}), last tried {kernel_width}")
            return CalibrationResult(min_s, max_s, kernel_width, False, iteration)

        kernel_width += 2


def calibrate(
    font: Font,
    config: Optional[KerningConfig] = None,
    font_size: Optional[int] = None,
) -> CalibrationResult:
    """Calibrate a font, raising CalibrationFailed when no balance is reached."""
    result = find_overlap_bounds(font, config, font_size)
    if not result.converged:
        raise CalibrationFailed(
            f"Calibration of {font.name} did not converge "
            f"(last kernel_width={result.kernel_width}, "
            f"min={result.min_overlap:.2f}, max={result.max_overlap:.2f})",
            result,
        )
    return result
