"""Separable Gaussian blur for glyph coverage grids.

Blurring turns a sharp glyph bitmap into a soft ink-density field so that
the overlap metric responds to perceived darkness rather than exact outline
edges. The blur is applied as a horizontal 1-D pass followed by a vertical
one, with out-of-range taps clamped to the nearest edge pixel.
"""

import math
import threading
from dataclasses import replace
from typing import Optional

import numpy as np
from scipy.ndimage import correlate1d

from .config import DEFAULT_KERNING_CONFIG
from .glyph import Glyph


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return int(math.floor(value + 0.5))


def sigma_for(width: int, kernel_width: Optional[float] = None,
              blur_factor: float = DEFAULT_KERNING_CONFIG.blur_factor) -> float:
    """Blur sigma for a bitmap: kernel_width / 4, else blur_factor * width."""
    if kernel_width is not None:
        return kernel_width / 4
    return blur_factor * width


def gaussian_kernel(sigma: float) -> np.ndarray:
    """1-D Gaussian sampled at -radius..radius, radius = round(sigma), summing to 1."""
    radius = round_half_up(sigma)
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    kernel = np.exp(-(offsets * offsets) / (2 * sigma * sigma))
    return kernel / kernel.sum()


class KernelCache:
    """Gaussian kernels keyed by sigma.

    Entries are read-only arrays and are never replaced once stored, so one
    cache can be shared by independent blur calls. Population is guarded by
    a lock.
    """

    def __init__(self) -> None:
        self._kernels: dict[float, np.ndarray] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._kernels)

    def kernel(self, sigma: float) -> np.ndarray:
        cached = self._kernels.get(sigma)
        if cached is not None:
            return cached

        with self._lock:
            if sigma not in self._kernels:
                kernel = gaussian_kernel(sigma)
                kernel.setflags(write=False)
                self._kernels[sigma] = kernel
            return self._kernels[sigma]


def gaussian_blur(
    coverage: np.ndarray,
    sigma: Optional[float] = None,
    kernel_width: Optional[float] = None,
    blur_factor: float = DEFAULT_KERNING_CONFIG.blur_factor,
    cache: Optional[KernelCache] = None,
) -> np.ndarray:
    """Blur a coverage grid with a separable Gaussian.

    Args:
        coverage: (H, W) grid of ink density values.
        sigma: Explicit standard deviation in pixels.
        kernel_width: Blur width used by calibration; overrides sigma with
            kernel_width / 4.
        blur_factor: Default sigma as a fraction of the bitmap width, used
            when neither sigma nor kernel_width is given.
        cache: Optional shared kernel cache.

    Returns:
        New float32 grid with the same shape as the input.
    """
    grid = np.asarray(coverage, dtype=np.float32)
    if kernel_width is not None or sigma is None:
        sigma = sigma_for(grid.shape[1], kernel_width, blur_factor)

    if sigma <= 0:
        return grid.copy()

    kernel = cache.kernel(sigma) if cache is not None else gaussian_kernel(sigma)

    # Horizontal pass, stored as float32, then vertical pass
    temp = correlate1d(grid.astype(np.float64), kernel, axis=1, mode="nearest")
    temp = temp.astype(np.float32)
    out = correlate1d(temp.astype(np.float64), kernel, axis=0, mode="nearest")
    return out.astype(np.float32)


def blur_glyph(
    glyph: Glyph,
    kernel_width: Optional[float] = None,
    blur_factor: float = DEFAULT_KERNING_CONFIG.blur_factor,
    cache: Optional[KernelCache] = None,
) -> Glyph:
    """Return a copy of the glyph with a blurred coverage grid."""
    blurred = gaussian_blur(
        glyph.coverage,
        kernel_width=kernel_width,
        blur_factor=blur_factor,
        cache=cache,
    )
    return replace(glyph, coverage=blurred)
