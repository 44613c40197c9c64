"""Unit tests for the overlap energy metric.

Uses uniform glyphs so every expected value can be counted by hand:
a 10x10 all-ones pair with advance 10 and zero bearing offset overlaps on
exactly -kern columns for kerns in [-10, 0].
"""

import numpy as np


class TestPlacement:
    """Tests for the left glyph placement offset."""

    def test_offset_formula(self, uniform_glyph):
        """Offset is -(advance + left bearing) + right bearing - kern."""
        from autokern.kerning.overlap import placement_offset

        left = uniform_glyph(advance_width=12.0, bearing_offset=3.0)
        right = uniform_glyph(bearing_offset=2.0)

        assert placement_offset(left, right, 0) == -(12.0 + 3.0) + 2.0
        assert placement_offset(left, right, -4) == -(12.0 + 3.0) + 2.0 + 4


class TestOverlap:
    """Tests for overlap energy."""

    def test_touching_glyphs_do_not_overlap(self, uniform_glyph):
        """At kern 0 the bitmaps abut and the intersection is empty."""
        from autokern.kerning.overlap import overlap

        g = uniform_glyph()
        assert overlap(g, g, 0) == 0.0

    def test_positive_kern_no_overlap(self, uniform_glyph):
        """Loosening never creates overlap."""
        from autokern.kerning.overlap import overlap

        g = uniform_glyph()
        for kern in (1, 5, 30):
            assert overlap(g, g, kern) == 0.0, f"Unexpected overlap at kern {kern}"

    def test_passed_through_glyphs_do_not_overlap(self, uniform_glyph):
        """A kern that pushes the left glyph past the right one gives 0."""
        from autokern.kerning.overlap import overlap

        g = uniform_glyph()
        assert overlap(g, g, -100) == 0.0

    def test_counts_overlapping_columns(self, uniform_glyph):
        """Each overlapping column of ones contributes its height."""
        from autokern.kerning.overlap import overlap

        g = uniform_glyph()
        assert overlap(g, g, -5) == 50.0
        assert overlap(g, g, -10) == 100.0
        assert overlap(g, g, -15) == 50.0

    def test_monotonic_while_tightening(self, uniform_glyph):
        """Overlap does not decrease as kern goes from 0 to -10."""
        from autokern.kerning.overlap import overlap

        g = uniform_glyph()
        values = [overlap(g, g, k) for k in range(0, -11, -1)]
        assert values == sorted(values), f"Overlap not monotonic: {values}"
        assert values[-1] == 100.0

    def test_non_negative_and_finite(self):
        """Random grids always give finite non-negative overlap."""
        from autokern.kerning.glyph import Glyph
        from autokern.kerning.overlap import overlap

        rng = np.random.default_rng(7)
        left = Glyph.from_coverage("a", rng.random((30, 25)), advance_width=18.3, bearing_offset=4.2)
        right = Glyph.from_coverage("b", rng.random((30, 21)), advance_width=15.0, bearing_offset=2.7)
        for kern in range(-30, 31, 3):
            value = overlap(left, right, kern)
            assert np.isfinite(value) and value >= 0.0, f"Bad overlap {value} at kern {kern}"

    def test_squares_both_sides(self, uniform_glyph):
        """Energy is the sum of left^2 * right^2."""
        from autokern.kerning.overlap import overlap

        left = uniform_glyph(value=0.5)
        right = uniform_glyph(value=1.0)
        # 4 columns x 10 rows x 0.25 * 1.0
        assert abs(overlap(left, right, -4) - 10.0) < 1e-6

    def test_rows_limited_to_shorter_glyph(self, uniform_glyph):
        """Only rows present in both bitmaps contribute."""
        from autokern.kerning.overlap import overlap

        tall = uniform_glyph(height=10)
        short = uniform_glyph(height=4)
        assert overlap(tall, short, -10) == 40.0
        assert overlap(short, tall, -10) == 40.0

    def test_fractional_offsets_between_neighbours(self, uniform_glyph):
        """Fractional kerns give values bracketed by the integer kerns."""
        from autokern.kerning.overlap import overlap

        g = uniform_glyph()
        low, mid, high = overlap(g, g, -2), overlap(g, g, -2.5), overlap(g, g, -3)
        assert low <= mid <= high, f"Expected {low} <= {mid} <= {high}"

    def test_equal_bearing_offsets_cancel(self, uniform_glyph):
        """Padding both glyphs by the same bearing offset does not move them."""
        from autokern.kerning.overlap import overlap

        plain = uniform_glyph()
        shifted = uniform_glyph(advance_width=10.0, bearing_offset=2.0)
        for kern in (-3, -7):
            assert overlap(shifted, shifted, kern) == overlap(plain, plain, kern)
