"""Nearest-colour matching and colour-difference metrics."""

from __future__ import annotations

import numpy as np
from skimage.color import deltaE_ciede2000, rgb2lab


def closest(color: np.ndarray, palette: np.ndarray) -> int:
    """Index of the palette entry nearest to *color*.

    Distance is the sum of squared R, G, B differences; alpha is ignored.
    *color* may hold negative or overflowed components (the accumulated
    dithering error is never clamped), so everything is kept signed.
    Ties go to the first entry.

    Args:
        color:   (3,) or (4,) signed integers.
        palette: (K, 3) or (K, 4) integers, K >= 1.

    Returns:
        Position of the winning entry in *palette*.
    """
    diff = np.asarray(palette, dtype=np.int64)[:, :3] - np.asarray(color, dtype=np.int64)[:3]
    # argmin reports the first occurrence of the minimum
    return int(np.argmin(np.sum(diff * diff, axis=1)))


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert (..., 3) uint8 RGB → (..., 3) float64 CIELAB."""
    return rgb2lab(rgb.astype(np.float64) / 255.0)


def mean_delta_e(reference: np.ndarray, candidate: np.ndarray) -> float:
    """Mean CIEDE2000 difference between two (H, W, 3) uint8 images."""
    return float(np.mean(deltaE_ciede2000(rgb_to_lab(reference), rgb_to_lab(candidate))))
