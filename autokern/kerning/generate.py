#!/usr/bin/env python3
"""
Generate kerning tables for a font.

Calibrates the font once, estimates the kern of every requested pair in
pixels and converts it to a percentage of the left glyph's advance width.
Tables are saved as JSON:

    {"font": "Roboto-Black", "fontSize": 100, "kerning": {"AV": -9.52, ...}}

Usage:
    autokern Roboto-Black.ttf -o Roboto-Black.json
    autokern Roboto-Black.ttf --pairs AV,To,Ye
    autokern Roboto-Black.ttf AV To Ye --strategy midpoint
"""

import argparse
import json
import logging
import math
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from tqdm import tqdm

from autokern.data.font import Font, FontLoadError, load_font

from .blur import KernelCache
from .calibrate import CalibrationFailed, CalibrationResult, calibrate
from .config import COMMON_PAIRS, KerningConfig, SelectionStrategy, validate_config
from .glyph import render_glyph
from .search import kern_pair

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@dataclass
class KerningTableResult:
    """Output of generate_kerning_table."""

    kerning_table: dict[str, float]
    calibration: CalibrationResult
    output_path: Optional[Path] = None


# =============================================================================
# Pair Estimation
# =============================================================================

def estimate_kern(
    left_char: str,
    right_char: str,
    font: Font,
    calibration: CalibrationResult,
    config: Optional[KerningConfig] = None,
    cache: Optional[KernelCache] = None,
) -> Optional[int]:
    """
    Estimate the kern of one pair in pixels.

    Args:
        left_char: Left character.
        right_char: Right character.
        font: Calibrated font.
        calibration: Result of calibrate() for this font.
        config: Kerning configuration.
        cache: Optional shared blur kernel cache.

    Returns:
        Kern in pixels, or None when the font lacks either character.
    """
    config = config or KerningConfig()
    if not font.has_glyph(left_char) or not font.has_glyph(right_char):
        logger.debug(f"Skipping {left_char}{right_char}: glyph missing from {font.name}")
        return None

    left = render_glyph(font, left_char, config)
    right = render_glyph(font, right_char, config)
    return kern_pair(
        left,
        right,
        calibration.min_overlap,
        calibration.max_overlap,
        calibration.kernel_width,
        config=config,
        cache=cache,
    )


def kern_to_percent(kern_px: float, advance_width: float) -> float:
    """Kern as a percentage of the advance width, rounded half up to 2 decimals."""
    if advance_width <= 0:
        raise ValueError(f"Advance width must be positive, got {advance_width}")
    percent = kern_px / advance_width * 100
    return math.floor(percent * 100 + 0.5) / 100


def parse_pairs(pairs: Union[str, Iterable[str], None]) -> list[str]:
    """Normalize a pair list to a list of unique 2-character strings.

    Accepts None or an empty value (the common pairs), a comma-separated
    string or an iterable of strings. Entries that are not exactly two
    characters after stripping are dropped.
    """
    if not pairs:
        candidates = COMMON_PAIRS
    elif isinstance(pairs, str):
        candidates = pairs.split(",")
    else:
        candidates = list(pairs)

    seen = set()
    result = []
    for pair in candidates:
        pair = pair.strip()
        if len(pair) == 2 and pair not in seen:
            seen.add(pair)
            result.append(pair)
    return result


# =============================================================================
# Kerning Tables
# =============================================================================

def write_kerning_table(
    path: Union[str, Path],
    font_name: str,
    font_size: int,
    kerning_table: dict[str, float],
) -> Path:
    """Save a kerning table wrapped with font metadata."""
    path = Path(path)
    output = {
        "font": font_name,
        "fontSize": font_size,
        "kerning": kerning_table,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(output, indent=2, ensure_ascii=False))
    return path


def load_kerning_table(path: Union[str, Path]) -> dict[str, float]:
    """Load a kerning table from either the wrapped or the flat JSON format."""
    data = json.loads(Path(path).read_text())
    table = data.get("kerning", data) if isinstance(data, dict) else None
    if not isinstance(table, dict):
        raise ValueError(f"{path} does not contain a kerning table")
    return {pair: float(value) for pair, value in table.items() if len(pair) == 2}


def generate_kerning_table(
    font_path: Union[str, Path],
    pairs: Union[str, Iterable[str], None] = None,
    output_path: Optional[Union[str, Path]] = None,
    write_file: bool = True,
    config: Optional[KerningConfig] = None,
    progress: bool = False,
) -> KerningTableResult:
    """
    Generate a kerning table for a font file.

    Args:
        font_path: Path to the TTF/OTF file.
        pairs: Pairs to compute (see parse_pairs); common pairs by default.
        output_path: JSON output path; defaults to "<font stem>.json".
        write_file: Whether to write the JSON file at all.
        config: Kerning configuration.
        progress: Show a progress bar over the pairs.

    Returns:
        KerningTableResult with the percentage table and the calibration.

    Raises:
        FontLoadError: If the font cannot be opened.
        CalibrationFailed: If the font cannot be calibrated.
    """
    config = config or KerningConfig()
    validate_config(config)
    font_path = Path(font_path)

    with load_font(font_path) as font:
        calibration = calibrate(font, config)
        cache = KernelCache()

        kerning_table: dict[str, float] = {}
        pair_list = parse_pairs(pairs)
        for pair in tqdm(pair_list, desc="Calculating pairs", disable=not progress):
            left_char, right_char = pair
            kern_px = estimate_kern(left_char, right_char, font, calibration, config, cache)
            if kern_px is None:
                continue

            advance = font.advance_width(left_char, config.font_size)
            if advance <= 0:
                logger.warning(f"Skipping {pair}: {left_char!r} has no advance width")
                continue

            kerning_table[pair] = kern_to_percent(kern_px, advance)
            logger.debug(f"{pair}: {kern_px} px ({kerning_table[pair]:.2f}%)")

    logger.info(f"Computed {len(kerning_table)}/{len(pair_list)} pairs for {font_path.name}")

    result = KerningTableResult(kerning_table=kerning_table, calibration=calibration)
    if write_file:
        output_path = Path(output_path) if output_path else Path(f"{font_path.stem}.json")
        result.output_path = write_kerning_table(
            output_path, font_path.stem, config.font_size, kerning_table
        )
        logger.info(f"Kerning table saved to: {result.output_path}")

    return result


def get_kerning_table(
    font_path: Union[str, Path],
    pairs: Union[str, Iterable[str], None] = None,
    config: Optional[KerningConfig] = None,
) -> dict[str, float]:
    """Kerning table for a font without writing anything to disk."""
    return generate_kerning_table(font_path, pairs, write_file=False, config=config).kerning_table


# =============================================================================
# Output Formatting
# =============================================================================

def format_table(kerning_table: dict[str, float], title: str = "Kerning Table") -> str:
    """Format a percentage table as aligned text, tightest pairs first."""
    lines = [
        title,
        "=" * 30,
        f"{'Pair':<8} {'Kerning (%)':>12}",
        "-" * 30,
    ]

    for pair, value in sorted(kerning_table.items(), key=lambda x: (x[1], x[0])):
        lines.append(f"{pair:<8} {value:>12.2f}")

    lines.append("-" * 30)
    lines.append(f"Total pairs: {len(kerning_table)}")
    return "\n".join(lines)


# =============================================================================
# CLI Interface
# =============================================================================

def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Auto-compute kerning values for glyph pairs or generate a kerning JSON table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Kerning table for the common pairs
    autokern Roboto-Black.ttf -o Roboto-Black.json

    # Selected pairs only
    autokern Roboto-Black.ttf --pairs AV,AW,To -o table.json

    # Print suggested kerning for a few pairs
    autokern Roboto-Black.ttf AV To Ye
        """,
    )

    parser.add_argument("font", type=Path, help="Path to font file (.ttf/.otf)")
    parser.add_argument("pairs", nargs="*", help="Pairs to print suggested kerning for")
    parser.add_argument("--output", "-o", type=Path, help="Write the kerning table to this JSON file")
    parser.add_argument("--pairs", dest="pair_list", help="Comma-separated pairs for the table")
    parser.add_argument("--size", "-s", type=int, help="Font size in pixels per em (default: 100)")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in SelectionStrategy],
        help="Kern selection strategy (default: conservative)",
    )
    parser.add_argument("--max-kern", type=int, help="Largest kern magnitude searched, in pixels")
    parser.add_argument("--kern-step", type=int, help="Search step in pixels")
    parser.add_argument("--eps", type=float, help="Overlap treated as no visible overlap")
    parser.add_argument("--blur-factor", type=float, help="Default blur sigma as a fraction of width")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose or os.environ.get("LOG_LEVEL", "").lower() == "debug":
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = KerningConfig.from_env().with_overrides(
            font_size=args.size,
            strategy=args.strategy,
            max_kern=args.max_kern,
            kern_step=args.kern_step,
            eps=args.eps,
            blur_factor=args.blur_factor,
        )
        validate_config(config)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    try:
        if args.pairs and not args.output and not args.pair_list:
            with load_font(args.font) as font:
                calibration = calibrate(font, config)
                cache = KernelCache()
                for pair in parse_pairs(args.pairs):
                    kern_px = estimate_kern(pair[0], pair[1], font, calibration, config, cache)
                    if kern_px is None:
                        print(f"{pair}: skipped (glyph missing)")
                        continue
                    advance = font.advance_width(pair[0], config.font_size)
                    percent = kern_to_percent(kern_px, advance) if advance > 0 else 0.0
                    print(f"{pair}: suggested kerning {kern_px:.2f} px ({percent:.2f}%)")
            return 0

        result = generate_kerning_table(
            args.font,
            pairs=args.pair_list or args.pairs or None,
            output_path=args.output,
            write_file=args.output is not None,
            config=config,
            progress=True,
        )
    except (FontLoadError, CalibrationFailed) as e:
        logger.error(str(e))
        return 1

    print(format_table(result.kerning_table, title=f"Kerning Table: {args.font.stem}"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
