"""Koala Paint file packing.

Layout::

    load address   2 bytes    little-endian, $6000
    bitmap      8000 bytes    8 bytes per cell, 4 pixels x 2 bits per byte
    screen RAM  1000 bytes    colour 1 << 4 | colour 2, one per cell
    colour RAM  1000 bytes    colour 3, one per cell
    background     1 byte

Cells are stored left to right, top to bottom.  The bit patterns are
indices into each cell's palette: 00 background, 01 and 10 the screen RAM
nibbles, 11 the colour RAM entry.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

CELL_WIDTH = 4
CELL_HEIGHT = 8
CELLS_X = 40
CELLS_Y = 25
BITMAP_SIZE = CELLS_X * CELLS_Y * CELL_HEIGHT
FILE_SIZE = 2 + BITMAP_SIZE + 2 * CELLS_X * CELLS_Y + 1
DEFAULT_LOAD_ADDRESS = 0x6000


@dataclass(frozen=True)
class KoalaImage:
    """Decoded contents of a Koala file."""

    pixmap: np.ndarray  # (200, 160) palette slots 0-3
    palettes: np.ndarray  # (25, 40, 4) master indices
    background: int
    load_address: int = DEFAULT_LOAD_ADDRESS


def bitmap_bytes(pixmap: np.ndarray, palettes: np.ndarray) -> bytes:
    """Pack the 2-bit pixels cell by cell.

    The size follows the palette grid rather than the pixmap; pixels or
    rows missing from a partial cell pack as zero bits.
    """
    tiles_y, tiles_x = palettes.shape[:2]
    padded = np.zeros((tiles_y * CELL_HEIGHT, tiles_x * CELL_WIDTH), dtype=np.uint8)
    h = min(pixmap.shape[0], padded.shape[0])
    w = min(pixmap.shape[1], padded.shape[1])
    padded[:h, :w] = pixmap[:h, :w]

    cells = padded.reshape(tiles_y, CELL_HEIGHT, tiles_x, CELL_WIDTH).transpose(0, 2, 1, 3)
    # leftmost pixel in the high bits
    packed = (cells[..., 0] << 6) | (cells[..., 1] << 4) | (cells[..., 2] << 2) | cells[..., 3]
    return packed.astype(np.uint8).tobytes()


def screen_bytes(palettes: np.ndarray) -> bytes:
    return ((palettes[..., 1] << 4) | palettes[..., 2]).astype(np.uint8).tobytes()


def color_bytes(palettes: np.ndarray) -> bytes:
    return palettes[..., 3].astype(np.uint8).tobytes()


def pack_koala(
    pixmap: np.ndarray,
    palettes: np.ndarray,
    background: int,
    load_address: int = DEFAULT_LOAD_ADDRESS,
) -> bytes:
    """Serialise a finished conversion.

    Args:
        pixmap:     (H, W) palette slots 0-3.
        palettes:   (tiles_y, tiles_x, 4) master indices, slot 0 the background.
        background: Master index of the shared background colour.
        load_address: Written first, little-endian.

    Returns:
        The file contents (10003 bytes for a full 160x200 frame).
    """
    return b"".join([
        load_address.to_bytes(2, "little"),
        bitmap_bytes(pixmap, palettes),
        screen_bytes(palettes),
        color_bytes(palettes),
        bytes([background]),
    ])


def unpack_koala(data: bytes) -> KoalaImage:
    """Parse a full-frame Koala file.

    Only the low nibble of colour RAM and background bytes is significant,
    as on the hardware.

    Raises:
        ValueError: if *data* is not exactly one Koala file long.
    """
    if len(data) != FILE_SIZE:
        msg = f"Koala file must be {FILE_SIZE} bytes, got {len(data)}"
        raise ValueError(msg)
    raw = np.frombuffer(data, dtype=np.uint8)
    cells = CELLS_X * CELLS_Y
    bitmap = raw[2 : 2 + BITMAP_SIZE].reshape(CELLS_Y, CELLS_X, CELL_HEIGHT)
    screen = raw[2 + BITMAP_SIZE : 2 + BITMAP_SIZE + cells].reshape(CELLS_Y, CELLS_X)
    color = raw[2 + BITMAP_SIZE + cells : -1].reshape(CELLS_Y, CELLS_X) & 0x0F
    background = int(raw[-1] & 0x0F)

    pixels = np.stack([(bitmap >> shift) & 0x03 for shift in (6, 4, 2, 0)], axis=-1)
    pixmap = pixels.transpose(0, 2, 1, 3).reshape(CELLS_Y * CELL_HEIGHT, CELLS_X * CELL_WIDTH)

    palettes = np.stack(
        [np.full_like(screen, background), screen >> 4, screen & 0x0F, color], axis=-1,
    )
    return KoalaImage(
        pixmap=pixmap.astype(np.uint8),
        palettes=palettes.astype(np.uint8),
        background=background,
        load_address=int(raw[0]) | int(raw[1]) << 8,
    )
