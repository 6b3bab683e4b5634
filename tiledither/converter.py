"""Full-frame conversion to C64 multicolor bitmap mode."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from tiledither.config import ConvertConfig
from tiledither.dithering import diffuse, to_palette
from tiledither.downsample import downsample_frame
from tiledither.image_io import render_preview
from tiledither.koala import pack_koala
from tiledither.palette import MASTER_PALETTE
from tiledither.planner import choose_background, plan_tile_palettes

logger = logging.getLogger(__name__)


class TileContext:
    """Dithering context where every tile has its own four colours.

    Holds the source samples, the output pixmap and the tile palette grid
    by reference; ``set`` writes palette slots (0-3) into the pixmap.
    """

    def __init__(
        self,
        samples: np.ndarray,
        palettes: np.ndarray,
        tile_width: int = 4,
        tile_height: int = 8,
    ) -> None:
        self.samples = np.asarray(samples, dtype=np.int64)
        self.palettes = palettes
        self.tile_width = tile_width
        self.tile_height = tile_height
        self.pixmap = np.zeros(self.samples.shape[:2], dtype=np.uint8)
        self._colors = MASTER_PALETTE[palettes]

    @property
    def width(self) -> int:
        return self.pixmap.shape[1]

    @property
    def height(self) -> int:
        return self.pixmap.shape[0]

    def at(self, x: int, y: int) -> np.ndarray:
        return self.samples[y, x]

    def palette_at(self, x: int, y: int) -> np.ndarray:
        return self._colors[y // self.tile_height, x // self.tile_width]

    def set(self, x: int, y: int, index: int) -> None:
        self.pixmap[y, x] = index


@dataclass
class DitherResult:
    """Everything a conversion produces.

    Attributes:
        pixmap:     (H, W) uint8 palette slots 0-3.
        palettes:   (tiles_y, tiles_x, 4) uint8 master indices.
        background: Master index shared by slot 0 of every tile.
        preview:    (H, 2 * W, 3) uint8 RGB rendering.
        data:       Packed Koala file.
    """

    pixmap: np.ndarray
    palettes: np.ndarray
    background: int
    preview: np.ndarray
    data: bytes


def dither_tiles(
    samples: np.ndarray,
    tile_width: int = 4,
    tile_height: int = 8,
) -> tuple[np.ndarray, np.ndarray, int]:
    """Plan and dither an already-halved image.

    Works for any size; edge tiles may be partial.

    Args:
        samples: (H, W, 3+) 16-bit colour samples.

    Returns:
        ``(pixmap, palettes, background)``.
    """
    h, w = samples.shape[:2]

    logger.info("Free conversion to the 16-colour palette ...")
    t0 = time.perf_counter()
    pass1 = to_palette(samples, MASTER_PALETTE)
    logger.info("Free conversion done  (%.1f s)", time.perf_counter() - t0)

    background = choose_background(pass1, tile_width, tile_height)
    palettes = plan_tile_palettes(pass1, background, tile_width, tile_height)

    logger.info("Dithering %dx%d with per-tile palettes ...", w, h)
    t0 = time.perf_counter()
    ctx = TileContext(samples, palettes, tile_width, tile_height)
    diffuse(ctx)
    logger.info("Tile dithering done  (%.1f s)", time.perf_counter() - t0)

    return ctx.pixmap, palettes, background


def convert_multicolor(
    samples: np.ndarray,
    config: ConvertConfig | None = None,
) -> DitherResult:
    """Convert a full screen frame to a multicolor bitmap.

    Args:
        samples: (H, W, 4) 16-bit samples, see :func:`image_io.load_image`.
        config:  Frame geometry and load address; defaults to the C64 frame.

    Raises:
        InvalidImageError: if the frame is not 320x200.
    """
    cfg = config or ConvertConfig()
    half = downsample_frame(samples, cfg.pixmap_width, cfg.pixmap_height)

    pixmap, palettes, background = dither_tiles(half, cfg.tile_width, cfg.tile_height)

    preview = render_preview(pixmap, palettes, cfg.tile_width, cfg.tile_height)
    data = pack_koala(pixmap, palettes, background, cfg.load_address)
    logger.debug("Packed %d bytes", len(data))

    return DitherResult(
        pixmap=pixmap,
        palettes=palettes,
        background=background,
        preview=preview,
        data=data,
    )
