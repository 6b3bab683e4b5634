"""The VIC-II master palette.

A representation of the C64 palette as seen on an NTSC HDTV. Since the
machine output S-Video, not every colour can be exact.
"""

from __future__ import annotations

import numpy as np

# name -> '#RRGGBB', in hardware order
C64_COLORS: dict[str, str] = {
    "black": "#000000",
    "white": "#FFFFFF",
    "red": "#8A4133",
    "cyan": "#2BBCD8",
    "purple": "#95499E",
    "green": "#399D2C",
    "blue": "#403A7B",
    "yellow": "#BFD10E",
    "orange": "#955621",
    "brown": "#534009",
    "light_red": "#DC6852",
    "dark_grey": "#505050",
    "grey": "#787878",
    "light_green": "#55EC42",
    "light_blue": "#786CE7",
    "light_grey": "#9F9F9F",
}


def _hex_to_rgb(hex_str: str) -> np.ndarray:
    """Parse '#RRGGBB' to (3,) uint8 array."""
    h = hex_str.lstrip("#")
    return np.array([int(h[i : i + 2], 16) for i in (0, 2, 4)], dtype=np.uint8)


#: (16, 3) uint8 RGB, index == hardware colour code.
MASTER_PALETTE_RGB: np.ndarray = np.array(
    [_hex_to_rgb(h) for h in C64_COLORS.values()], dtype=np.uint8,
)
MASTER_PALETTE_RGB.setflags(write=False)


def widen_rgba(rgb: np.ndarray) -> np.ndarray:
    """Widen 8-bit RGB(A) to 16-bit RGBA (``v * 0x101``), opaque if no alpha."""
    rgb = np.asarray(rgb, dtype=np.int64)
    if rgb.shape[-1] == 3:
        alpha = np.full(rgb.shape[:-1] + (1,), 0xFF, dtype=np.int64)
        rgb = np.concatenate([rgb, alpha], axis=-1)
    return rgb * 0x101


#: (16, 4) int64 16-bit RGBA, the form the ditherer compares against.
MASTER_PALETTE: np.ndarray = widen_rgba(MASTER_PALETTE_RGB)
MASTER_PALETTE.setflags(write=False)


def palette_names() -> list[str]:
    return list(C64_COLORS)
