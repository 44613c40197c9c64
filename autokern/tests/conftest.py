"""Shared pytest fixtures for autokern tests.

Provides fixtures for:
- Synthetic TrueType fonts built with fontTools (no system fonts needed)
- Uniform coverage glyphs for exact overlap arithmetic
- Temporary directories for test outputs
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add the repository root to path so autokern imports without installing
repo_root = Path(__file__).parent.parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))


UNITS_PER_EM = 1000
ASCENT = 800
DESCENT = -200

# Outlines in font units: char -> (glyph name, advance, contours).
# Outer contours run clockwise, holes counter-clockwise.
TEST_GLYPHS = {
    "l": ("l", 200, [[(50, 0), (50, 700), (150, 700), (150, 0)]]),
    "n": ("n", 500, [[(50, 0), (50, 500), (450, 500), (450, 0),
                      (350, 0), (350, 400), (150, 400), (150, 0)]]),
    "o": ("o", 500, [[(50, 0), (50, 500), (450, 500), (450, 0)],
                     [(150, 100), (350, 100), (350, 400), (150, 400)]]),
    "A": ("A", 600, [[(50, 0), (300, 700), (550, 0)]]),
    "V": ("V", 600, [[(50, 700), (550, 700), (300, 0)]]),
    "T": ("T", 600, [[(250, 0), (250, 600), (50, 600), (50, 700),
                      (550, 700), (550, 600), (350, 600), (350, 0)]]),
}


def build_test_font(path: Path, glyphs: dict, family: str = "Autokern Test") -> Path:
    """Write a minimal TrueType font with the given outlines plus a space."""
    from fontTools.fontBuilder import FontBuilder
    from fontTools.pens.ttGlyphPen import TTGlyphPen

    glyph_order = [".notdef", "space"] + [name for name, _, _ in glyphs.values()]
    fb = FontBuilder(UNITS_PER_EM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)

    glyf = {}
    hmtx = {}

    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, 700))
    pen.lineTo((450, 700))
    pen.lineTo((450, 0))
    pen.closePath()
    glyf[".notdef"] = pen.glyph()
    hmtx[".notdef"] = (500, 50)

    glyf["space"] = TTGlyphPen(None).glyph()
    hmtx["space"] = (250, 0)

    cmap = {0x20: "space"}
    for char, (name, advance, contours) in glyphs.items():
        pen = TTGlyphPen(None)
        for contour in contours:
            pen.moveTo(contour[0])
            for point in contour[1:]:
                pen.lineTo(point)
            pen.closePath()
        glyf[name] = pen.glyph()
        lsb = min((x for contour in contours for x, _ in contour), default=0)
        hmtx[name] = (advance, lsb)
        cmap[ord(char)] = name

    fb.setupGlyf(glyf)
    fb.setupHorizontalMetrics(hmtx)
    fb.setupCharacterMap(cmap)
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupOS2(
        sTypoAscender=ASCENT,
        sTypoDescender=DESCENT,
        usWinAscent=ASCENT,
        usWinDescent=-DESCENT,
    )
    fb.setupNameTable(
        {
            "familyName": family,
            "styleName": "Regular",
            "uniqueFontIdentifier": f"{family}-Regular",
            "fullName": f"{family} Regular",
            "psName": f"{family.replace(' ', '')}-Regular",
            "version": "Version 1.000",
        }
    )
    fb.setupPost()

    path.parent.mkdir(parents=True, exist_ok=True)
    fb.save(str(path))
    return path


@pytest.fixture(scope="session")
def font_path(tmp_path_factory):
    """Synthetic font with l, n, o, A, V, T and space."""
    return build_test_font(tmp_path_factory.mktemp("fonts") / "AutokernTest.ttf", TEST_GLYPHS)


@pytest.fixture(scope="session")
def blank_l_font_path(tmp_path_factory):
    """Font whose "l" has no outline, so calibration can never balance."""
    glyphs = dict(TEST_GLYPHS)
    glyphs["l"] = ("l", 200, [])
    return build_test_font(tmp_path_factory.mktemp("fonts") / "BlankL.ttf", glyphs)


@pytest.fixture(scope="session")
def no_o_font_path(tmp_path_factory):
    """Font lacking the "o" tuning character."""
    glyphs = {c: outline for c, outline in TEST_GLYPHS.items() if c != "o"}
    return build_test_font(tmp_path_factory.mktemp("fonts") / "NoO.ttf", glyphs)


@pytest.fixture
def font(font_path):
    """Opened synthetic font, closed after the test."""
    from autokern.data.font import load_font

    with load_font(font_path) as f:
        yield f


@pytest.fixture
def uniform_glyph():
    """Factory for glyphs with a constant coverage grid."""
    from autokern.kerning.glyph import Glyph

    def make(width=10, height=10, value=1.0, advance_width=None, bearing_offset=0.0, char="x"):
        return Glyph.from_coverage(
            char,
            np.full((height, width), value, dtype=np.float32),
            advance_width=advance_width,
            bearing_offset=bearing_offset,
        )

    return make
