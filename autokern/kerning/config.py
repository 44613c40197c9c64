"""
Kerning Configuration

Configuration for the overlap-based kerning estimator: rendering size,
blur, search range, selection strategy, tuning characters and the default
pair list. Every field can be overridden from the environment through
KerningConfig.from_env().
"""

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Mapping, Optional


# =============================================================================
# Selection Strategies
# =============================================================================

class SelectionStrategy(str, Enum):
    """How a kern value is picked from the sampled overlap curve."""

    CONSERVATIVE = "conservative"  # Tightest kern that still has no visible overlap
    CALIBRATED = "calibrated"  # Keep overlap inside the calibrated self-overlap band
    MIDPOINT = "midpoint"  # Overlap closest to the middle of the band
    ARGMAX = "argmax"  # Maximum overlap
    NO_OVERLAP = "no-overlap"  # Kern closest to zero with no visible overlap

    @classmethod
    def parse(cls, value: "str | SelectionStrategy") -> "SelectionStrategy":
        """Accept enum members, values ("no-overlap") or names ("NO_OVERLAP")."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        try:
            return cls(normalized)
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown selection strategy {value!r} (choices: {choices})") from None


# =============================================================================
# Estimator Configuration
# =============================================================================

@dataclass(frozen=True)
class KerningConfig:
    """Configuration for kerning estimation."""

    # Rendering
    font_size: int = 100  # Pixels per em
    padding: int = 10  # Blank pixels left and right of the glyph ink

    # Default blur: sigma = blur_factor * bitmap width (when no kernel width is given)
    blur_factor: float = 0.15

    # Search range in pixels: kerns in [-max_kern, max_kern] every kern_step
    max_kern: int = 30
    kern_step: int = 1

    # Selection
    strategy: SelectionStrategy = SelectionStrategy.CONSERVATIVE
    eps: float = 1.0  # Overlap at or below this counts as "no visible overlap"

    # Calibration glyphs
    tuning_chars: str = "lno"

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy", SelectionStrategy.parse(self.strategy))
        object.__setattr__(self, "kern_step", max(1, int(self.kern_step)))

    @property
    def kern_range(self) -> range:
        """Sampled kerns, anchored at zero so that kern 0 is always included."""
        limit = (self.max_kern // self.kern_step) * self.kern_step
        return range(-limit, limit + 1, self.kern_step)

    def with_overrides(self, **overrides) -> "KerningConfig":
        """Copy with the given fields replaced; None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "KerningConfig":
        """Build a config from environment variables.

        Recognized variables: FONT_SIZE, GLYPH_PADDING, BLUR_SIGMA_FACTOR,
        MAX_KERN, KERN_STEP, SELECTION_STRATEGY, NO_OVERLAP_EPS.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            font_size=int(env.get("FONT_SIZE", defaults.font_size)),
            padding=int(env.get("GLYPH_PADDING", defaults.padding)),
            blur_factor=float(env.get("BLUR_SIGMA_FACTOR", defaults.blur_factor)),
            max_kern=int(env.get("MAX_KERN", defaults.max_kern)),
            kern_step=int(env.get("KERN_STEP", defaults.kern_step)),
            strategy=env.get("SELECTION_STRATEGY", defaults.strategy),
            eps=float(env.get("NO_OVERLAP_EPS", defaults.eps)),
        )


# =============================================================================
# Kerning Pairs
# =============================================================================

# Pairs that commonly need kerning; the default table when no pairs are given.
# Duplicates are removed by parse_pairs().
COMMON_PAIRS: List[str] = [
    "AV", "AW", "AY", "AO", "AC", "AT", "AF", "AB", "AD", "AG", "AJ", "AQ",
    "AR", "AS", "AL", "AU", "AX", "AZ",
    "VA", "TA", "FA", "Pa",
    "To", "Tw", "Ty", "Te", "Tr",
    "WA", "WO", "Wa",
    "Ye", "Yo", "Yp", "Yd",
    "La", "Lo", "LC", "LD", "LT",
    "Po", "Pa", "Pe", "Pr",
    "rn", "rm",
    "Th", "Tn",
    "Co",
    "on", "ox", "or", "oo", "oa", "oe",
    "To", "Tr", "Ta", "Te", "Ti", "Tu", "Ty", "Tw", "Th",
    "he",
]


# =============================================================================
# Default Configuration Instance
# =============================================================================

DEFAULT_KERNING_CONFIG = KerningConfig()


# =============================================================================
# Configuration Validation
# =============================================================================

def validate_config(config: KerningConfig) -> None:
    """
    Validate configuration settings for consistency.

    Args:
        config: Kerning configuration.

    Raises:
        ValueError: If configuration is invalid.
    """
    if config.font_size < 1:
        raise ValueError(f"Font size must be positive, got {config.font_size}")

    if config.padding < 0:
        raise ValueError(f"Padding must be non-negative, got {config.padding}")

    if config.blur_factor <= 0:
        raise ValueError(f"Blur factor must be positive, got {config.blur_factor}")

    if config.max_kern < 0:
        raise ValueError(f"max_kern must be non-negative, got {config.max_kern}")

    if config.eps < 0:
        raise ValueError(f"eps must be non-negative, got {config.eps}")

    if not config.tuning_chars:
        raise ValueError("At least one tuning character is required for calibration")


if __name__ == "__main__":
    config = KerningConfig.from_env()
    print("Kerning Configuration Summary")
    print("=" * 50)
    print(f"  Font size: {config.font_size}px (padding {config.padding}px)")
    print(f"  Blur factor: {config.blur_factor}")
    print(f"  Kern range: [-{config.max_kern}, {config.max_kern}] step {config.kern_step}")
    print(f"  Strategy: {config.strategy.value} (eps={config.eps})")
    print(f"  Tuning chars: {config.tuning_chars}")
    print(f"  Common pairs: {len(set(COMMON_PAIRS))}")
