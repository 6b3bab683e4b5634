"""Floyd-Steinberg error-diffusion dithering with per-pixel palettes.

The textbook algorithm commits every pixel to one global palette.  Here
each pixel asks its context which palette applies to it, which lets the
same pass serve both a free conversion to the 16 master colours and the
final conversion where every 4x8 cell only has four colours to pick from.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np

from tiledither.color_utils import closest


class DitherContext(Protocol):
    """Anything that can be dithered.

    ``at`` returns the source colour of a pixel (at least R, G, B),
    ``palette_at`` the (K, 3+) colours that pixel may use, and ``set``
    receives the position of the chosen entry within that palette.
    """

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def at(self, x: int, y: int) -> np.ndarray: ...

    def palette_at(self, x: int, y: int) -> np.ndarray: ...

    def set(self, x: int, y: int, index: int) -> None: ...


def _share(residual: np.ndarray, sixteenths: int) -> np.ndarray:
    """``residual * sixteenths / 16`` with integer division truncating toward zero."""
    return np.sign(residual) * (np.abs(residual) * sixteenths // 16)


def diffuse(ctx: DitherContext) -> None:
    """Run the dithering pass over *ctx*.

    Pixels are visited left to right, top to bottom, and ``set`` is called
    exactly once for each.  The residual passed on is the source colour
    minus the chosen colour; the error that was added in to make the
    choice is not carried forward again.  Integer division drops a little
    of every residual.
    """
    h, w = ctx.height, ctx.width
    error = np.zeros((h, w, 3), dtype=np.int64)

    for y in range(h):
        for x in range(w):
            source = np.asarray(ctx.at(x, y), dtype=np.int64)[:3]
            palette = ctx.palette_at(x, y)

            index = closest(source + error[y, x], palette)
            residual = source - np.asarray(palette[index], dtype=np.int64)[:3]

            if x + 1 < w:
                error[y, x + 1] += _share(residual, 7)
            if y + 1 < h:
                # NB: column 0 never receives the down-left share and the
                # down-right share is bounded by x + 2, not x + 1.  Output
                # files depend on both; do not "fix".
                if x - 1 > 0:
                    error[y + 1, x - 1] += _share(residual, 3)
                if x + 2 < w:
                    error[y + 1, x + 1] += _share(residual, 1)
                error[y + 1, x] += _share(residual, 5)

            ctx.set(x, y, index)


class ImageContext:
    """Maps a whole image onto one shared palette."""

    def __init__(self, samples: np.ndarray, palette: np.ndarray) -> None:
        self.samples = np.asarray(samples, dtype=np.int64)
        self.palette = np.asarray(palette, dtype=np.int64)
        self.pixmap = np.zeros(self.samples.shape[:2], dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.samples.shape[1]

    @property
    def height(self) -> int:
        return self.samples.shape[0]

    def at(self, x: int, y: int) -> np.ndarray:
        return self.samples[y, x]

    def palette_at(self, x: int, y: int) -> np.ndarray:
        return self.palette

    def set(self, x: int, y: int, index: int) -> None:
        self.pixmap[y, x] = index


def to_palette(samples: np.ndarray, palette: np.ndarray) -> np.ndarray:
    """Dither *samples* onto a single *palette*.

    Args:
        samples: (H, W, 3+) colour samples in the palette's range.
        palette: (K, 3+) colours.

    Returns:
        (H, W) uint8 - index into *palette* for every pixel.
    """
    ctx = ImageContext(samples, palette)
    diffuse(ctx)
    return ctx.pixmap
