"""Evaluation tooling for kerning results.

Modules:
    visualize: Coverage PNGs, before/after kerning renders, example sets
"""

from .visualize import (
    EXAMPLE_SENTENCES,
    render_kerning_comparison,
    render_kerning_examples,
    save_coverage_png,
)

__all__ = [
    "EXAMPLE_SENTENCES",
    "save_coverage_png",
    "render_kerning_comparison",
    "render_kerning_examples",
]
