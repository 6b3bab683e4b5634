"""Image loading, preview rendering, and output files."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from tiledither.palette import MASTER_PALETTE_RGB


def load_image(path: str | Path) -> np.ndarray:
    """Decode an image into 16-bit alpha-premultiplied samples.

    Each 8-bit channel ``v`` becomes ``v * 0x101`` scaled by alpha, so an
    opaque pixel keeps the full 0-65535 range.

    Returns:
        (H, W, 4) uint16 RGBA array.
    """
    with Image.open(path) as img:
        rgba = np.array(img.convert("RGBA"), dtype=np.uint32)
    alpha = rgba[..., 3:4]
    rgb = rgba[..., :3] * 0x101 * alpha // 0xFF
    return np.concatenate([rgb, alpha * 0x101], axis=-1).astype(np.uint16)


def samples_to_rgb(samples: np.ndarray) -> np.ndarray:
    """Narrow 16-bit samples back to (H, W, 3) uint8 RGB."""
    return (samples[..., :3] >> 8).astype(np.uint8)


def render_preview(
    pixmap: np.ndarray,
    palettes: np.ndarray,
    tile_width: int = 4,
    tile_height: int = 8,
) -> np.ndarray:
    """Draw a finished conversion the way the screen shows it.

    Every pixel is looked up in its tile's palette and drawn two screen
    pixels wide.

    Args:
        pixmap:   (H, W) palette slots 0-3.
        palettes: (tiles_y, tiles_x, 4) master indices.

    Returns:
        (H, 2 * W, 3) uint8 RGB.
    """
    h, w = pixmap.shape
    ty = (np.arange(h) // tile_height)[:, np.newaxis]
    tx = (np.arange(w) // tile_width)[np.newaxis, :]
    master = palettes[ty, tx, pixmap.astype(np.intp)]
    return np.repeat(MASTER_PALETTE_RGB[master], 2, axis=1)


def save_preview(
    array: np.ndarray,
    path: str | Path,
    pixel_upscale: int = 1,
) -> None:
    """Save an RGB array, nearest-neighbour-upscaled when asked."""
    img = Image.fromarray(array.astype(np.uint8))
    if pixel_upscale > 1:
        h, w = array.shape[:2]
        img = img.resize((w * pixel_upscale, h * pixel_upscale), Image.NEAREST)
    img.save(path)


def save_data(data: bytes, path: str | Path) -> None:
    Path(path).write_bytes(data)


def make_comparison_grid(
    original_path: str | Path,
    preview: np.ndarray,
    output_path: str | Path,
    pixel_upscale: int = 2,
) -> None:
    """Create a 2-panel comparison: Original | Preview.

    Both panels are scaled to the preview's size times *pixel_upscale*.
    """
    ph, pw = preview.shape[:2]
    panel_w = pw * pixel_upscale
    panel_h = ph * pixel_upscale
    label_height = 36

    with Image.open(original_path) as src:
        original = src.convert("RGB").resize((panel_w, panel_h), Image.NEAREST)
    preview_img = Image.fromarray(preview).resize((panel_w, panel_h), Image.NEAREST)

    panels = [original, preview_img]
    labels = ["Original", "C64 multicolor"]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)
