"""Colour-cell planning: the shared background and each cell's three colours.

In multicolor mode every 4x8 cell may show four colours.  One of them, the
background, is global; the other three are chosen per cell.  Both choices
are made from a free 16-colour conversion of the image by counting which
colours each cell actually uses.
"""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)

NUM_COLORS = 16
CELL_COLORS = 3  # per-cell colours besides the background


def tile_histograms(
    pixmap: np.ndarray,
    tile_width: int = 4,
    tile_height: int = 8,
    num_colors: int = NUM_COLORS,
) -> np.ndarray:
    """Count colour usage per tile.

    Tiles at the right and bottom edge may be partial; they only count
    the pixels that exist.

    Args:
        pixmap: (H, W) master-palette indices.

    Returns:
        (tiles_y, tiles_x, num_colors) int64 counts.

    Raises:
        ValueError: if *pixmap* is empty.
    """
    if pixmap.size == 0:
        msg = "Cannot plan tiles for an empty pixmap"
        raise ValueError(msg)
    h, w = pixmap.shape
    tiles_y = -(-h // tile_height)
    tiles_x = -(-w // tile_width)
    ty = (np.arange(h) // tile_height)[:, np.newaxis]
    tx = (np.arange(w) // tile_width)[np.newaxis, :]

    hist = np.zeros((tiles_y, tiles_x, num_colors), dtype=np.int64)
    np.add.at(hist, (ty, tx, pixmap.astype(np.intp)), 1)
    return hist


def background_costs(
    pixmap: np.ndarray,
    tile_width: int = 4,
    tile_height: int = 8,
) -> np.ndarray:
    """Compromise cost of every candidate background colour.

    For a candidate, each tile that uses more than three other colours
    contributes the pixels of all but its three most used ones: those
    pixels will be forced onto a colour they did not ask for.

    Returns:
        (16,) int64 - cost per candidate index.
    """
    hist = tile_histograms(pixmap, tile_width, tile_height).reshape(-1, NUM_COLORS)
    costs = np.zeros(NUM_COLORS, dtype=np.int64)
    for bg in range(NUM_COLORS):
        counts = hist.copy()
        counts[:, bg] = 0
        # A tile with <= 3 colours has only zeros below its top three.
        costs[bg] = np.sort(counts, axis=1)[:, :-CELL_COLORS].sum()
    return costs


def choose_background(
    pixmap: np.ndarray,
    tile_width: int = 4,
    tile_height: int = 8,
) -> int:
    """Pick the background colour that involves the fewest compromises.

    Equal costs go to the lowest colour index.
    """
    costs = background_costs(pixmap, tile_width, tile_height)
    bg = int(np.argmin(costs))
    logger.debug("Background costs: %s", costs.tolist())
    logger.info("Background colour %d (cost %d pixels)", bg, costs[bg])
    return bg


def top_three(counts: np.ndarray) -> tuple[int, int, int]:
    """The three most used colours of a tile, as ``(i1, i2, i3)``.

    ``i3`` is the most used.  Colours are scanned in index order and a
    later colour only displaces an earlier one with a strictly greater
    count, so ties keep the lower index.  Unused colours still qualify,
    which fills the palette of a tile with fewer than three colours.
    The slot order is what ends up in the screen and colour RAM bytes.
    """
    i1 = i2 = i3 = 0
    c1 = c2 = c3 = -1
    for i, c in enumerate(counts.tolist()):
        if c > c3:
            c1, c2, c3 = c2, c3, c
            i1, i2, i3 = i2, i3, i
        elif c > c2:
            c1, c2 = c2, c
            i1, i2 = i2, i
        elif c > c1:
            c1 = c
            i1 = i
    return i1, i2, i3


def plan_tile_palettes(
    pixmap: np.ndarray,
    background: int,
    tile_width: int = 4,
    tile_height: int = 8,
) -> np.ndarray:
    """Assign every tile its four colours.

    Args:
        pixmap: (H, W) master-palette indices from the free conversion.
        background: Shared colour for slot 0.

    Returns:
        (tiles_y, tiles_x, 4) uint8 master indices,
        ``[background, i1, i2, i3]`` per tile.
    """
    hist = tile_histograms(pixmap, tile_width, tile_height)
    hist[..., background] = 0

    tiles_y, tiles_x = hist.shape[:2]
    palettes = np.empty((tiles_y, tiles_x, CELL_COLORS + 1), dtype=np.uint8)
    for ty in range(tiles_y):
        for tx in range(tiles_x):
            palettes[ty, tx] = (background, *top_three(hist[ty, tx]))
    logger.debug("Planned %dx%d tile palettes", tiles_x, tiles_y)
    return palettes
