"""Overlap energy between two blurred glyphs.

The right glyph sits with its bitmap at x in [0, right.width). The left
glyph sits one advance width to the left of the right glyph's origin,
shifted by kern (negative kern pulls the pair together), so its bitmap
covers [l_offset, l_offset + left.width). Only columns inside both ranges
contribute:

    overlap = sum over (x, y) of left(x - l_offset, y)^2 * right(x, y)^2

Squaring each side concentrates the metric on pixels where both glyphs are
strongly inked, so faint blur tails do not dominate.
"""

import math

import numpy as np

from .glyph import Glyph


def placement_offset(left: Glyph, right: Glyph, kern: float) -> float:
    """Left bitmap x position in the right bitmap's coordinates."""
    return -(left.advance_width + left.bearing_offset) + right.bearing_offset - kern


def overlap(left: Glyph, right: Glyph, kern: float) -> float:
    """
    Overlap energy of two glyphs at a trial kern.

    Args:
        left: Left (blurred) glyph.
        right: Right (blurred) glyph.
        kern: Horizontal adjustment in pixels, negative = tighter.

    Returns:
        Non-negative overlap energy; exactly 0.0 when the bitmaps do not
        intersect horizontally.
    """
    l_offset = placement_offset(left, right, kern)
    x_start = max(0.0, l_offset)
    x_end = min(float(right.width), l_offset + left.width)
    if x_end <= x_start:
        return 0.0

    # Integer pixel columns of the right bitmap inside [x_start, x_end)
    xs = np.arange(math.ceil(x_start), math.ceil(x_end))
    lx = np.floor(xs - l_offset).astype(np.intp)
    inside = (lx >= 0) & (lx < left.width)
    xs, lx = xs[inside], lx[inside]
    if xs.size == 0:
        return 0.0

    # Rows beyond either bitmap read as 0 and add nothing
    rows = min(left.height, right.height)
    left_vals = left.coverage[:rows, lx].astype(np.float64)
    right_vals = right.coverage[:rows, xs].astype(np.float64)
    return float(np.sum((left_vals * left_vals) * (right_vals * right_vals)))
