"""
Autokern: kerning estimation from blurred glyph overlap.

This package renders glyphs to coverage bitmaps, blurs them into soft
"ink density" fields and measures how much two neighbouring glyphs collide
at trial horizontal offsets. A per-font calibration step picks the blur
radius, and a selection strategy turns the overlap curve into one kern
value per pair.

Subpackages:
- data: Font loading, metrics and rasterization (fontTools + Pillow)
- kerning: Glyph model, blur, overlap metric, calibration, kern search,
  kerning table generation and CLI
- evaluation: Debug images and before/after kerning renders

Usage:
    # Kerning table for the common pairs, written to Roboto-Black.json
    autokern Roboto-Black.ttf -o Roboto-Black.json

    # A few pairs printed to the console
    autokern Roboto-Black.ttf AV To Ye

    # Before/after comparison images
    autokern-render Roboto-Black.ttf Roboto-Black.json ./kerning-examples
"""

__version__ = "0.1.0"
