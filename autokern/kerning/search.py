"""Kern search: pick one kern value from the sampled overlap curve.

Both glyphs are blurred, overlap energy is sampled across
[-max_kern, max_kern] every kern_step pixels, and a SelectionStrategy
chooses one kern from the samples. Strategies never fail: when no sample
qualifies they return 0 (no adjustment).

Passing CALIBRATION_BOUNDS as (min_overlap, max_overlap) switches to the
calibration search instead: the kern in [-max_kern, 0] with the largest
overlap.
"""

import logging
from typing import Callable, Iterator, NamedTuple, Optional, Sequence

from .blur import KernelCache, blur_glyph
from .config import DEFAULT_KERNING_CONFIG, KerningConfig, SelectionStrategy
from .glyph import Glyph
from .overlap import overlap

logger = logging.getLogger(__name__)

CALIBRATION_BOUNDS = (0.0, 1e10)


class OverlapSample(NamedTuple):
    kern: int
    overlap: float


def sample_overlaps(left: Glyph, right: Glyph, config: KerningConfig) -> list[OverlapSample]:
    """Overlap at every kern of config.kern_range, ascending by kern."""
    return [OverlapSample(k, overlap(left, right, k)) for k in config.kern_range]


def _outward(samples: Sequence[OverlapSample]) -> Iterator[OverlapSample]:
    """Samples ordered 0, -step, +step, -2*step, ... (closest to zero first)."""
    return iter(sorted(samples, key=lambda s: (abs(s.kern), s.kern > 0)))


def max_overlap_kern(
    left: Glyph,
    right: Glyph,
    config: Optional[KerningConfig] = None,
) -> int:
    """Kern in [-max_kern, 0] where two blurred glyphs overlap most (ties: least negative)."""
    config = config or DEFAULT_KERNING_CONFIG
    best_kern, best_overlap = 0, 0.0
    for kern in reversed([k for k in config.kern_range if k <= 0]):
        s = overlap(left, right, kern)
        if s > best_overlap:
            best_kern, best_overlap = kern, s
    return best_kern


# ─── Strategies ───────────────────────────────────────────────────────


def select_conservative(
    samples: Sequence[OverlapSample],
    min_overlap: float,
    max_overlap: float,
    eps: float,
) -> int:
    """Tightest kern before overlap first exceeds eps, walking from the loose end.

    Samples are walked from the most positive kern toward the most negative
    and the walk stops at the first sample above eps. On a non-monotone
    curve a gap that reopens past a collision is never used, so this is not
    the same as the most negative kern with overlap <= eps.
    """
    last_good: Optional[int] = None
    for sample in sorted(samples, key=lambda s: s.kern, reverse=True):
        if sample.overlap > eps:
            return last_good if last_good is not None else 0
        last_good = sample.kern
    return last_good if last_good is not None else 0


def select_calibrated(
    samples: Sequence[OverlapSample],
    min_overlap: float,
    max_overlap: float,
    eps: float,
) -> int:
    """Keep kern 0 when its overlap is inside the band, else walk back into it."""
    by_kern = {s.kern: s.overlap for s in samples}
    s0 = by_kern[0]
    if min_overlap <= s0 <= max_overlap:
        return 0

    if s0 < min_overlap:
        walk = sorted((k for k in by_kern if k < 0), reverse=True)
    else:
        walk = sorted(k for k in by_kern if k > 0)

    for kern in walk:
        if min_overlap <= by_kern[kern] <= max_overlap:
            return kern
    return 0


def select_midpoint(
    samples: Sequence[OverlapSample],
    min_overlap: float,
    max_overlap: float,
    eps: float,
) -> int:
    """Kern whose overlap is closest to the middle of the band."""
    target = (min_overlap + max_overlap) / 2
    best: Optional[OverlapSample] = None
    for sample in _outward(samples):
        if best is None or abs(sample.overlap - target) < abs(best.overlap - target):
            best = sample
    return best.kern if best is not None else 0


def select_argmax(
    samples: Sequence[OverlapSample],
    min_overlap: float,
    max_overlap: float,
    eps: float,
) -> int:
    """Kern with the largest overlap, ties resolved closest to zero."""
    best: Optional[OverlapSample] = None
    for sample in _outward(samples):
        if best is None or sample.overlap > best.overlap:
            best = sample
    return best.kern if best is not None else 0


def select_no_overlap(
    samples: Sequence[OverlapSample],
    min_overlap: float,
    max_overlap: float,
    eps: float,
) -> int:
    """Kern closest to zero with overlap <= eps."""
    for sample in _outward(samples):
        if sample.overlap <= eps:
            return sample.kern
    return 0


Selector = Callable[[Sequence[OverlapSample], float, float, float], int]

SELECTORS: dict[SelectionStrategy, Selector] = {
    SelectionStrategy.CONSERVATIVE: select_conservative,
    SelectionStrategy.CALIBRATED: select_calibrated,
    SelectionStrategy.MIDPOINT: select_midpoint,
    SelectionStrategy.ARGMAX: select_argmax,
    SelectionStrategy.NO_OVERLAP: select_no_overlap,
}


# ─── Entry point ──────────────────────────────────────────────────────


def kern_pair(
    left: Glyph,
    right: Glyph,
    min_overlap: float,
    max_overlap: float,
    kernel_width: Optional[float] = None,
    config: Optional[KerningConfig] = None,
    strategy: Optional[SelectionStrategy] = None,
    cache: Optional[KernelCache] = None,
) -> int:
    """
    Estimate the kern between two unblurred glyphs.

    Args:
        left: Left glyph.
        right: Right glyph.
        min_overlap: Lower bound of the calibrated overlap band.
        max_overlap: Upper bound of the calibrated overlap band.
        kernel_width: Calibrated blur width; the config's default blur is
            used when omitted.
        config: Search range, eps and default strategy.
        strategy: Overrides config.strategy.
        cache: Optional shared blur kernel cache.

    Returns:
        Kern in pixels within [-max_kern, max_kern].
    """
    config = config or DEFAULT_KERNING_CONFIG
    blurred_left = blur_glyph(left, kernel_width, config.blur_factor, cache)
    blurred_right = blur_glyph(right, kernel_width, config.blur_factor, cache)

    if (min_overlap, max_overlap) == CALIBRATION_BOUNDS:
        return max_overlap_kern(blurred_left, blurred_right, config)

    strategy = SelectionStrategy.parse(strategy or config.strategy)
    samples = sample_overlaps(blurred_left, blurred_right, config)
    kern = SELECTORS[strategy](samples, min_overlap, max_overlap, config.eps)

    logger.debug(f"{left.char}{right.char}: strategy={strategy.value}, eps={config.eps}, "
                 f"band=[{min_overlap:.2f}, {max_overlap:.2f}] -> kern={kern}")
    return kern
