"""Font access for kerning estimation.

Parses font files using fonttools for metrics and outline bounds, and
rasterizes single characters with Pillow's FreeType renderer. Everything the
kerning core needs from a font goes through the Font class below.

Usage:
    from autokern.data.font import load_font

    with load_font("Roboto-Black.ttf") as font:
        if font.has_glyph("A"):
            print(font.advance_width("A", 100), font.bounding_box("A", 100))
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
from fontTools.pens.boundsPen import BoundsPen
from fontTools.ttLib import TTFont
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)


class FontLoadError(Exception):
    """Raised when a font file cannot be read or is not a usable font."""


@dataclass(frozen=True)
class BoundingBox:
    """Glyph ink bounds in pixels, in font orientation (y grows upward)."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom


@dataclass(frozen=True)
class EmMetrics:
    """Vertical font metrics in font units."""

    ascender: int
    descender: int
    units_per_em: int

    @property
    def em_height(self) -> int:
        return self.ascender - self.descender


def _read_em_metrics(tt_font: TTFont) -> EmMetrics:
    """Read ascender/descender from hhea, falling back to OS/2 typo metrics."""
    head = tt_font.get("head")
    hhea = tt_font.get("hhea")
    os2 = tt_font.get("OS/2")

    units_per_em = head.unitsPerEm if head else 1000

    if hhea and hhea.ascent - hhea.descent > 0:
        return EmMetrics(hhea.ascent, hhea.descent, units_per_em)
    if os2 and os2.sTypoAscender - os2.sTypoDescender > 0:
        return EmMetrics(os2.sTypoAscender, os2.sTypoDescender, units_per_em)

    logger.warning("Font has no usable vertical metrics, assuming 80/20 split of the em")
    return EmMetrics(round(units_per_em * 0.8), -round(units_per_em * 0.2), units_per_em)


class Font:
    """A parsed font file.

    Metrics and bounds come from fonttools; rasterization uses Pillow's
    FreeType binding on the same file. Sizes are given in pixels per em.
    """

    def __init__(self, path: Union[str, Path], tt_font: TTFont) -> None:
        self.path = Path(path)
        self._tt_font = tt_font
        self._cmap = tt_font.getBestCmap() or {}
        self._glyph_set = tt_font.getGlyphSet()
        self._hmtx = tt_font["hmtx"]
        self._em_metrics = _read_em_metrics(tt_font)

        # Bounds in font units per glyph name, and Pillow fonts per pixel size
        self._bounds_cache: dict[str, Optional[tuple[float, float, float, float]]] = {}
        self._image_fonts: dict[int, ImageFont.FreeTypeFont] = {}

    def __enter__(self) -> "Font":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._tt_font.close()

    @property
    def name(self) -> str:
        """File stem, used to name kerning tables."""
        return self.path.stem

    @property
    def family_name(self) -> str:
        name_table = self._tt_font.get("name")
        if name_table:
            for record in name_table.names:
                if record.nameID == 1:
                    try:
                        return record.toUnicode()
                    except UnicodeDecodeError:
                        continue
        return self.name

    def _to_pixels(self, value: float, font_size: float) -> float:
        return value * font_size / self._em_metrics.units_per_em

    def _glyph_name(self, char: str) -> str:
        codepoint = ord(char)
        if codepoint not in self._cmap:
            raise KeyError(f"Font {self.name} has no glyph for {char!r} (U+{codepoint:04X})")
        return self._cmap[codepoint]

    def has_glyph(self, char: str) -> bool:
        """Whether the character is mapped in the font's cmap."""
        return len(char) == 1 and ord(char) in self._cmap

    def em_metrics(self) -> EmMetrics:
        return self._em_metrics

    def advance_width(self, char: str, font_size: float) -> float:
        """Horizontal advance of a character in pixels."""
        width, _lsb = self._hmtx.metrics[self._glyph_name(char)]
        return self._to_pixels(width, font_size)

    def bounding_box(self, char: str, font_size: float) -> BoundingBox:
        """Ink bounds of a character in pixels.

        Glyphs without outlines (e.g. space) report an all-zero box.
        """
        glyph_name = self._glyph_name(char)
        if glyph_name not in self._bounds_cache:
            pen = BoundsPen(self._glyph_set)
            self._glyph_set[glyph_name].draw(pen)
            self._bounds_cache[glyph_name] = pen.bounds

        bounds = self._bounds_cache[glyph_name]
        if bounds is None:
            return BoundingBox(0.0, 0.0, 0.0, 0.0)

        x_min, y_min, x_max, y_max = bounds
        return BoundingBox(
            left=self._to_pixels(x_min, font_size),
            top=self._to_pixels(y_max, font_size),
            right=self._to_pixels(x_max, font_size),
            bottom=self._to_pixels(y_min, font_size),
        )

    def _image_font(self, font_size: int) -> ImageFont.FreeTypeFont:
        if font_size not in self._image_fonts:
            self._image_fonts[font_size] = ImageFont.truetype(str(self.path), font_size)
        return self._image_fonts[font_size]

    def draw_char(
        self,
        draw: ImageDraw.ImageDraw,
        origin: tuple[float, float],
        char: str,
        font_size: int,
        fill=0,
    ) -> None:
        """Draw one character with its origin on the baseline at `origin`."""
        draw.text(origin, char, fill=fill, font=self._image_font(font_size), anchor="ls")

    def rasterize(
        self,
        char: str,
        font_size: int,
        canvas_size: tuple[int, int],
        origin: tuple[float, float],
    ) -> np.ndarray:
        """Render a character black on white.

        Args:
            char: Single character to render.
            font_size: Pixels per em.
            canvas_size: (width, height) of the output raster.
            origin: (x, y) pixel position of the glyph origin on the
                baseline, measured from the top-left corner.

        Returns:
            uint8 luminance array of shape (height, width), 255 = background.
        """
        width, height = canvas_size
        img = Image.new("L", (width, height), color=255)
        draw = ImageDraw.Draw(img)
        self.draw_char(draw, origin, char, font_size)
        return np.array(img, dtype=np.uint8)


def load_font(path: Union[str, Path]) -> Font:
    """Open a TTF/OTF file.

    Args:
        path: Path to the font file.

    Returns:
        Parsed Font.

    Raises:
        FontLoadError: If the file is missing, unreadable or not a font with
            the tables needed for metrics.
    """
    path = Path(path)
    try:
        tt_font = TTFont(path)
        # Tables load lazily; touch the required ones so broken files fail here
        tt_font["head"]
        tt_font["hmtx"]
        font = Font(path, tt_font)
    except Exception as e:
        raise FontLoadError(f"Could not open font {path}: {e}") from e

    logger.debug(f"Loaded font {path} ({len(font._cmap)} mapped characters)")
    return font
