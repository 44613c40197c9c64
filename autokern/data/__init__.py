"""Font data access for kerning estimation.

Modules:
    font: Font loading, metrics, bounds and rasterization
"""

from .font import BoundingBox, EmMetrics, Font, FontLoadError, load_font

__all__ = [
    "BoundingBox",
    "EmMetrics",
    "Font",
    "FontLoadError",
    "load_font",
]
