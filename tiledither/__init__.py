"""
tiledither
==========

Floyd-Steinberg dithering generalised to a palette per pixel, applied to
the Commodore 64's multicolor bitmap mode: 160x200 double-width pixels in
4x8 cells, each cell limited to a shared background colour plus three of
its own.  Results are written as Koala Paint files with a PNG preview.
"""

__version__ = "1.0.0"

from tiledither.config import ConvertConfig
from tiledither.converter import DitherResult, TileContext, convert_multicolor, dither_tiles
from tiledither.dithering import DitherContext, ImageContext, diffuse, to_palette
from tiledither.downsample import InvalidImageError, downsample_frame, halve_width
from tiledither.image_io import load_image, render_preview, save_preview
from tiledither.koala import KoalaImage, pack_koala, unpack_koala
from tiledither.palette import MASTER_PALETTE, MASTER_PALETTE_RGB
from tiledither.planner import choose_background, plan_tile_palettes

__all__ = [
    "MASTER_PALETTE",
    "MASTER_PALETTE_RGB",
    "ConvertConfig",
    "DitherContext",
    "DitherResult",
    "ImageContext",
    "InvalidImageError",
    "KoalaImage",
    "TileContext",
    "choose_background",
    "convert_multicolor",
    "diffuse",
    "dither_tiles",
    "downsample_frame",
    "halve_width",
    "load_image",
    "pack_koala",
    "plan_tile_palettes",
    "render_preview",
    "save_preview",
    "to_palette",
    "unpack_koala",
]
