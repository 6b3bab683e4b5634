"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from tiledither.color_utils import mean_delta_e
from tiledither.config import ConvertConfig
from tiledither.converter import DitherResult, convert_multicolor
from tiledither.downsample import InvalidImageError
from tiledither.image_io import (
    load_image,
    make_comparison_grid,
    samples_to_rgb,
    save_data,
    save_preview,
)
from tiledither.palette import palette_names

app = typer.Typer(
    name="tiledither",
    help="Convert 320x200 images to C64 multicolor bitmaps (Koala Paint format).",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _convert_one(img_path: Path, output_dir: Path, cfg: ConvertConfig) -> DitherResult:
    """Convert *img_path* and write its preview, data and optional comparison."""
    samples = load_image(img_path)
    result = convert_multicolor(samples, cfg)

    stem = img_path.stem
    preview_path = output_dir / f"{stem}{cfg.preview_suffix}.{cfg.output_format}"
    data_path = output_dir / f"{stem}{cfg.data_extension}"
    save_preview(result.preview, preview_path, cfg.pixel_upscale)
    save_data(result.data, data_path)

    if cfg.save_comparison:
        comp_path = output_dir / f"{stem}_comparison.{cfg.output_format}"
        make_comparison_grid(img_path, result.preview, comp_path)

    frame = samples_to_rgb(samples[:, : result.preview.shape[1]])
    err = mean_delta_e(frame, result.preview)
    console.print(
        f"  [green]✓[/green] {data_path.name}, {preview_path.name}  "
        f"[dim]background={palette_names()[result.background]}"
        f"  ΔE={err:.1f}[/dim]"
    )
    return result


# Defaults come from ConvertConfig - single source of truth
_DEFAULTS = ConvertConfig()


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    upscale: int = typer.Option(
        _DEFAULTS.pixel_upscale, "--upscale", "-u", help="Preview upscale factor",
    ),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Save an Original | Preview image",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Convert all images in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)
    logger = logging.getLogger("tiledither")

    cfg = ConvertConfig(
        pixel_upscale=upscale,
        save_comparison=comparison,
        input_dir=input_dir,
        output_dir=output_dir,
    )

    output_dir.mkdir(parents=True, exist_ok=True)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place 320x200 .png / .jpg / .gif files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]C64 MULTICOLOR CONVERTER[/bold]\n"
        f"Frame: {cfg.frame_width}x{cfg.frame_height}  |  "
        f"Cells: {cfg.tile_width}x{cfg.tile_height}\n"
        f"Images: {len(images)}",
        border_style="cyan",
    ))

    failed = 0
    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t_total = time.perf_counter()
        try:
            _convert_one(img_path, output_dir, cfg)
        except (InvalidImageError, OSError) as exc:
            failed += 1
            console.print(f"  [red]✗[/red] {img_path.name}: {escape(str(exc))}")
            continue
        logger.info("%s converted in %.1f s", img_path.name, time.perf_counter() - t_total)

    style = "green" if not failed else "yellow"
    console.print(Panel.fit(
        f"[bold {style}]DONE[/bold {style}] - {len(images) - failed} converted, "
        f"{failed} failed - results in [bold]{output_dir}/[/bold]",
        border_style=style,
    ))
    if failed:
        raise typer.Exit(1)


# -- single-image command ----------------------------------------------

@app.command()
def single(
    source: Path = typer.Argument(..., help="Path to a 320x200 image"),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Defaults to the image's folder",
    ),
    upscale: int = typer.Option(_DEFAULTS.pixel_upscale, "--upscale", "-u"),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Convert a single image to <stem>.koa and <stem>-dithered.png."""
    _setup_logging(verbose)

    out = output_dir if output_dir is not None else source.parent
    out.mkdir(parents=True, exist_ok=True)
    cfg = ConvertConfig(pixel_upscale=upscale, save_comparison=comparison)

    try:
        _convert_one(source, out, cfg)
    except (InvalidImageError, OSError) as exc:
        console.print(f"[red]Error converting {source}:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc


if __name__ == "__main__":
    app()
