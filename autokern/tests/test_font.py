"""Tests for font loading, metrics and rasterization.

Uses the synthetic font from conftest (1000 units per em, ascent 800,
descent -200), so at 100 pixels per em one font unit is 0.1 pixel.
"""

import numpy as np
import pytest


class TestLoadFont:
    """Tests for opening font files."""

    def test_missing_file(self, tmp_path):
        """A missing path raises FontLoadError."""
        from autokern.data.font import FontLoadError, load_font

        with pytest.raises(FontLoadError):
            load_font(tmp_path / "missing.ttf")

    def test_not_a_font(self, tmp_path):
        """Arbitrary bytes raise FontLoadError."""
        from autokern.data.font import FontLoadError, load_font

        bogus = tmp_path / "bogus.ttf"
        bogus.write_bytes(b"this is not a font file at all")
        with pytest.raises(FontLoadError):
            load_font(bogus)

    def test_truncated_table_data(self, tmp_path):
        """A table directory pointing past the end of the file raises FontLoadError."""
        from autokern.data.font import FontLoadError, load_font

        # sfnt header with one table record for "head" and no table data
        header = b"\x00\x01\x00\x00" + b"\x00\x01" + b"\x00\x10\x00\x00\x00\x00"
        record = b"head" + b"\x00" * 12
        broken = tmp_path / "truncated.ttf"
        broken.write_bytes(header + record)
        with pytest.raises(FontLoadError):
            load_font(broken)

    def test_truncated_real_font(self, font_path, tmp_path):
        """A font cut off partway raises FontLoadError."""
        from autokern.data.font import FontLoadError, load_font

        broken = tmp_path / "cut.ttf"
        broken.write_bytes(font_path.read_bytes()[:200])
        with pytest.raises(FontLoadError):
            load_font(broken)

    def test_names(self, font):
        """name is the file stem, family_name comes from the name table."""
        assert font.name == "AutokernTest"
        assert font.family_name == "Autokern Test"

    def test_context_manager_closes(self, font_path):
        """The with-block returns the font itself."""
        from autokern.data.font import Font, load_font

        with load_font(font_path) as f:
            assert isinstance(f, Font)
            assert f.has_glyph("l")


class TestMetrics:
    """Tests for glyph and font metrics."""

    def test_has_glyph(self, font):
        """Mapped characters are found, unmapped ones and strings are not."""
        assert font.has_glyph("A")
        assert font.has_glyph(" ")
        assert not font.has_glyph("Z")
        assert not font.has_glyph("AV")

    def test_advance_width_scales(self, font):
        """Advance widths are converted to pixels at the requested size."""
        assert font.advance_width("l", 100) == 20.0
        assert font.advance_width("A", 100) == 60.0
        assert font.advance_width("A", 50) == 30.0

    def test_advance_width_missing_glyph(self, font):
        """Unmapped characters raise KeyError."""
        with pytest.raises(KeyError):
            font.advance_width("Z", 100)

    def test_bounding_box(self, font):
        """Ink bounds of the rectangle glyph are exact."""
        bbox = font.bounding_box("l", 100)
        assert bbox.left == pytest.approx(5.0)
        assert bbox.right == pytest.approx(15.0)
        assert bbox.bottom == pytest.approx(0.0)
        assert bbox.top == pytest.approx(70.0)
        assert bbox.width == pytest.approx(10.0)
        assert bbox.height == pytest.approx(70.0)

    def test_empty_glyph_bounding_box(self, font):
        """Glyphs without outlines report an all-zero box."""
        from autokern.data.font import BoundingBox

        assert font.bounding_box(" ", 100) == BoundingBox(0.0, 0.0, 0.0, 0.0)

    def test_em_metrics(self, font):
        """Vertical metrics come from hhea."""
        metrics = font.em_metrics()
        assert metrics.ascender == 800
        assert metrics.descender == -200
        assert metrics.units_per_em == 1000
        assert metrics.em_height == 1000


class TestRasterize:
    """Tests for character rasterization."""

    def test_shape_and_dtype(self, font):
        """The raster matches the requested canvas."""
        raster = font.rasterize("o", 100, (60, 100), (5.0, 80.0))
        assert raster.shape == (100, 60)
        assert raster.dtype == np.uint8

    def test_black_on_white(self, font):
        """Ink is dark and the background stays white."""
        raster = font.rasterize("l", 100, (30, 100), (5.0, 80.0))
        assert raster.min() < 64, "Expected dark ink pixels"
        assert raster[:, 0].min() == 255, "Left padding column should be blank"
        assert raster[-1].min() == 255, "Descender row should be blank for 'l'"

    def test_space_is_blank(self, font):
        """Characters without outlines render nothing."""
        raster = font.rasterize(" ", 100, (21, 100), (10.0, 80.0))
        assert raster.min() == 255
