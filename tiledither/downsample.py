"""Width halving for the double-width multicolor pixels."""

from __future__ import annotations

import numpy as np


class InvalidImageError(ValueError):
    """The source image cannot be converted (wrong frame size)."""


def halve_width(samples: np.ndarray) -> np.ndarray:
    """Average each horizontal pixel pair, all four channels.

    Args:
        samples: (H, W, C) unsigned samples.  A trailing odd column is dropped.

    Returns:
        (H, W // 2, C) array of the same dtype; averages truncate and keep
        the full sample width.
    """
    w = samples.shape[1] // 2
    wide = samples[:, : w * 2].astype(np.uint32)
    return ((wide[:, 0::2] + wide[:, 1::2]) // 2).astype(samples.dtype)


def downsample_frame(
    samples: np.ndarray,
    width: int = 160,
    height: int = 200,
) -> np.ndarray:
    """Halve a full screen frame to the multicolor pixel grid.

    Raises:
        InvalidImageError: unless the source is ``2 * width`` (give or take
            the odd column) by *height*.
    """
    src_h, src_w = samples.shape[:2]
    if src_w // 2 != width or src_h != height:
        msg = f"Image to convert must be {width * 2}x{height}, got {src_w}x{src_h}"
        raise InvalidImageError(msg)
    return halve_width(samples)
