"""Visualization tools for checking kerning results.

Generates:
- Coverage images: a glyph bitmap (raw or blurred) as a grayscale PNG
- Kerning comparisons: a sample text without (top) and with (bottom) kerning
- Example sets: one comparison per pair of a kerning table, plus a summary

Usage:
    autokern-render Roboto-Black.ttf Roboto-Black.json ./kerning-examples
"""

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, ImageDraw

from autokern.data.font import Font, FontLoadError, load_font
from autokern.kerning.generate import load_kerning_table

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CANVAS_WIDTH = 1400
CANVAS_HEIGHT = 600

# Sample text per pair; other pairs are rendered on their own
EXAMPLE_SENTENCES: dict[str, str] = {
    "AV": "AVOCADO VALLEY",
    "AW": "AWARDS AWAITING",
    "AY": "ANYONE ANYWAY",
    "AF": "AFRICA FROZEN",
    "AB": "ABSOLUTE BEGINNING",
    "AD": "ADVANCED DESIGN",
    "AG": "AGILE GARDEN",
    "AQ": "AQUATIC QUALITY",
    "AR": "ARCHITECTURE RISING",
    "AS": "ASSISTANT ASSISTING",
    "AX": "AXIS AXLE",
    "AZ": "AZURE AZIMUTH",
    "VA": "VALID ANSWERS",
    "FA": "FANTASTIC ADVENTURES",
    "Pa": "Particular PARTY",
    "WA": "WAS GEHT AB",
    "WO": "WO GEHEN WIR HIN?",
    "Wa": "Waffle Wagon",
    "Ta": "Tactical Table",
    "Ye": "Yellow Yesterday",
    "Yp": "Yuppie Young",
    "Po": "Powerful Poet",
    "Pe": "Perpendicular Peace",
    "oo": "Foolish Moonlight",
    "oa": "Coastal Roaming",
    "oe": "Poet Opening",
}


def save_coverage_png(coverage: np.ndarray, output_path: Union[str, Path]) -> Path:
    """Save a coverage grid as a min-max normalized grayscale PNG.

    Args:
        coverage: (H, W) grid, e.g. Glyph.coverage before or after blurring.
        output_path: Path to save the output image.

    Returns:
        The output path.
    """
    grid = np.asarray(coverage, dtype=np.float64)
    v_min, v_max = float(grid.min()), float(grid.max())
    v_range = v_max - v_min if v_max - v_min > 0 else 1.0

    pixels = np.clip(np.round((grid - v_min) / v_range * 255), 0, 255).astype(np.uint8)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(pixels).save(output_path)
    logger.info(f"Saved bitmap to {output_path} ({grid.shape[1]}x{grid.shape[0]}, "
                f"min={v_min:.2f}, max={v_max:.2f}, range={v_range:.2f})")
    return output_path


def draw_text(
    draw: ImageDraw.ImageDraw,
    font: Font,
    text: str,
    origin: tuple[float, float],
    font_size: int,
    kerning_table: Optional[dict[str, float]] = None,
) -> float:
    """Draw text glyph by glyph, applying table kerning between neighbours.

    Characters missing from the font are skipped.

    Returns:
        Total advance of the drawn text in pixels.
    """
    x, baseline = origin
    start_x = x
    drawn = [char for char in text if font.has_glyph(char)]
    for i, char in enumerate(drawn):
        font.draw_char(draw, (x, baseline), char, font_size)
        advance = font.advance_width(char, font_size)
        x += advance

        # Table values are percentages of the left glyph's advance
        if kerning_table and i < len(drawn) - 1:
            percent = kerning_table.get(char + drawn[i + 1])
            if percent is not None:
                x += percent / 100 * advance

    return x - start_x


def render_kerning_comparison(
    font: Font,
    text: str,
    kerning_table: dict[str, float],
    output_path: Union[str, Path],
    font_size: int = 120,
) -> Path:
    """Render `text` without kerning (top half) and with it (bottom half)."""
    img = Image.new("RGB", (CANVAS_WIDTH, CANVAS_HEIGHT), (255, 255, 255))
    draw = ImageDraw.Draw(img)

    half = CANVAS_HEIGHT // 2
    draw_text(draw, font, text, (50, 80 + font_size), font_size)
    draw_text(draw, font, text, (50, half + 20 + font_size), font_size, kerning_table)

    draw.line([(0, half), (CANVAS_WIDTH, half)], fill=(204, 204, 204))

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    img.save(output_path)
    return output_path


def example_filename(pair: str) -> str:
    """PNG name unique per pair even on case-insensitive filesystems ("WA" vs "Wa")."""
    safe = re.sub(r"[^A-Za-z0-9_-]", "_", pair)
    code_points = "-".join(f"{ord(c):X}" for c in pair)
    return f"{safe}_{code_points}.png"


def render_summary(
    font_name: str,
    kerning_table: dict[str, float],
    output_path: Path,
) -> Path:
    """Text listing of the table on one page; pairs past the page end are cut."""
    img = Image.new("RGB", (1200, 600), (255, 255, 255))
    draw = ImageDraw.Draw(img)
    draw.text((30, 20), f"Kerning Table: {font_name}", fill=(0, 0, 0))

    y = 60
    for pair, value in kerning_table.items():
        draw.text((30, y), f"{pair}: {value:.2f}%", fill=(0, 0, 0))
        y += 20
        if y > 550:
            break

    img.save(output_path)
    return output_path


def render_kerning_examples(
    font_path: Union[str, Path],
    table_path: Union[str, Path],
    output_dir: Union[str, Path] = "kerning-examples",
    font_size: int = 120,
) -> list[Path]:
    """
    Render a before/after image for every pair of a kerning table.

    Args:
        font_path: Path to the font the table was computed for.
        table_path: Kerning table JSON (wrapped or flat format).
        output_dir: Directory for the PNGs; created if missing.
        font_size: Rendering size in pixels per em.

    Returns:
        Paths of the rendered pair images (the summary page is not included).
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    kerning_table = load_kerning_table(table_path)

    logger.info("Rendering kerning examples...")
    written = []
    with load_font(font_path) as font:
        for pair, value in kerning_table.items():
            text = EXAMPLE_SENTENCES.get(pair, pair)
            path = render_kerning_comparison(
                font, text, kerning_table, output_dir / example_filename(pair), font_size
            )
            logger.info(f"{pair}: {value:.2f}% -> {path}")
            written.append(path)

        summary = render_summary(font.name, kerning_table, output_dir / "summary.png")

    logger.info(f"Generated {len(written)} examples in {output_dir}/ (summary: {summary})")
    return written


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Render before/after comparisons of kerning")
    parser.add_argument("font", type=Path, help="Path to font file (.ttf/.otf)")
    parser.add_argument("table", type=Path, help="Path to kerning JSON file")
    parser.add_argument(
        "output_dir",
        type=Path,
        nargs="?",
        default=Path("kerning-examples"),
        help="Output directory (default: ./kerning-examples)",
    )
    parser.add_argument("--size", "-s", type=int, default=120, help="Font size in pixels per em")
    args = parser.parse_args(argv)

    try:
        render_kerning_examples(args.font, args.table, args.output_dir, args.size)
    except (FontLoadError, OSError, ValueError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
