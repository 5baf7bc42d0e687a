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

from tile_mosaic.compositor import generate_mosaic
from tile_mosaic.config import MosaicConfig
from tile_mosaic.errors import MosaicError
from tile_mosaic.image_io import save_png

app = typer.Typer(
    name="tile-mosaic",
    help="Rebuild an image out of a folder of smaller images.",
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
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


@app.command()
def mosaic(
    target: Path = typer.Argument(..., help="Image to recreate"),
    tile_dir: Path = typer.Argument(..., help="Folder of .jpg / .png tiles"),
    mix: bool = typer.Option(False, "--mix", help="Avoid repeating recent tiles"),
    random_mix: bool = typer.Option(
        False, "--random-mix", help="Pick randomly among the closest tiles",
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output PNG [default: output.png]",
    ),
    tile_size: int | None = typer.Option(
        None, "--tile-size", "-t", min=1,
        help="Tile side in pixels [env IMAGE_SIZE_IN_COLLAGE, default 40]",
    ),
    mixing_limit: int | None = typer.Option(
        None, "--mixing-limit", min=1,
        help="Repeat-avoidance window [env MIXING_LIMIT, default 4]",
    ),
    random_distance: int | None = typer.Option(
        None, "--random-distance", min=1,
        help="Closest-K pool for --random-mix [env RANDOM_MAX_MIXING_DISTANCE, default 3]",
    ),
    max_side: int | None = typer.Option(
        None, "--max-side", "-m", min=1, help="Downsample target to this longest side",
    ),
    seed: int | None = typer.Option(None, "--seed", "-s", help="Random seed"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Decode tiles on every use"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Recreate TARGET using the images in TILE_DIR and write a PNG."""
    _setup_logging(verbose)
    logger = logging.getLogger("tile_mosaic")

    try:
        cfg = MosaicConfig.from_env(
            tile_size=tile_size,
            mixing_limit=mixing_limit,
            random_max_mixing_distance=random_distance,
            mix=mix,
            random_mix=random_mix,
            max_side=max_side,
            seed=seed,
            cache_tiles=not no_cache,
            output_path=output,
        )
    except MosaicError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    console.print(Panel.fit(
        f"[bold]TILE MOSAIC[/bold]\n"
        f"Target: {escape(str(target))}  |  Tiles: {escape(str(tile_dir))}/\n"
        f"Tile size: {cfg.tile_size}px  |  Mix: {cfg.mix} (limit {cfg.mixing_limit})\n"
        f"Random mix: {cfg.random_mix} (top {cfg.random_max_mixing_distance})",
        border_style="cyan",
    ))

    def _progress(x: int, width: int) -> None:
        logger.info("progress: %d/%d", x, width)

    t_total = time.perf_counter()
    try:
        canvas = generate_mosaic(target, tile_dir, cfg, progress=_progress)
        path = save_png(canvas, cfg.output_path)
    except (MosaicError, OSError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    elapsed = time.perf_counter() - t_total
    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - {escape(str(path))}  "
        f"[dim]{canvas.width}x{canvas.height}  time={elapsed:.1f}s[/dim]",
        border_style="green",
    ))


if __name__ == "__main__":
    app()
