"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class ConvertConfig:
    """All tuneable parameters for a conversion run.

    Attributes:
        frame_width:     Width of the source frame in screen pixels.
        frame_height:    Height of the source frame.
        tile_width:      Width of a colour cell in (double-width) pixels.
        tile_height:     Height of a colour cell.
        load_address:    C64 load address written at the start of the file.
        preview_suffix:  Appended to the input stem for the preview image.
        data_extension:  Extension of the packed bitmap file.
        pixel_upscale:   Each preview pixel becomes n x n in the saved image.
        output_format:   Image format for saved previews.
        save_comparison: Generate a side-by-side Original | Preview image.
        input_dir:       Folder to scan for source images (batch mode).
        output_dir:      Folder for results (batch mode).
    """

    # Hardware frame
    frame_width: int = 320
    frame_height: int = 200
    tile_width: int = 4
    tile_height: int = 8

    # Koala output
    load_address: int = 0x6000
    preview_suffix: str = "-dithered"
    data_extension: str = ".koa"

    # Output
    pixel_upscale: int = 1
    output_format: str = "png"
    save_comparison: bool = False

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".gif", ".bmp"}
    )

    @property
    def pixmap_width(self) -> int:
        """Width of the pixel grid after halving (multicolor pixels are doubled)."""
        return self.frame_width // 2

    @property
    def pixmap_height(self) -> int:
        return self.frame_height
