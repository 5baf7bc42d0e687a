"""Per-pixel tile compositing and the end-to-end pipeline."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

import numpy as np
from PIL import Image

from tile_mosaic.catalog import build_catalog
from tile_mosaic.config import MosaicConfig
from tile_mosaic.errors import ConfigurationError
from tile_mosaic.image_io import TileLoader, load_target
from tile_mosaic.selection import RandomSource, SelectionPolicy

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def canvas_size(width: int, height: int, tile_size: int) -> tuple[int, int]:
    """Output (w, h) for a *width* x *height* target."""
    return width * tile_size, height * tile_size


def compose_mosaic(
    target: np.ndarray,
    policy: SelectionPolicy,
    load_tile: Callable[[str], Image.Image],
    tile_size: int,
    progress: ProgressCallback | None = None,
) -> Image.Image:
    """Draw one tile per target pixel onto a new canvas.

    Pixels are visited column by column (outer loop over x, inner over y),
    so consecutive history entries are vertical neighbours.

    Args:
        target:    (H, W, 3) uint8 - the target, one grid cell per pixel.
        policy:    resolves each pixel colour to a tile.
        load_tile: returns the image for a tile identifier.
        tile_size: side of each grid cell in the output.
        progress:  called as ``progress(x, width)`` after each column.

    Returns:
        RGB canvas of ``(W * tile_size, H * tile_size)``.
    """
    if target.ndim != 3 or target.shape[0] == 0 or target.shape[1] == 0:
        raise ConfigurationError(f"Target image has no pixels (shape {target.shape})")
    h, w = target.shape[:2]
    cell = (tile_size, tile_size)
    canvas = Image.new("RGB", canvas_size(w, h, tile_size))

    for x in range(w):
        for y in range(h):
            tile = policy.select(target[y, x])
            policy.record(tile)
            img = load_tile(tile.identifier)
            if img.size != cell:
                img = img.resize(cell, Image.LANCZOS)
            canvas.paste(img, (x * tile_size, y * tile_size))
        if progress is not None:
            progress(x, w)
    return canvas


def generate_mosaic(
    target_path: str | Path,
    tile_dir: str | Path,
    cfg: MosaicConfig,
    rng: RandomSource | None = None,
    progress: ProgressCallback | None = None,
) -> Image.Image:
    """Load the target, build the catalog and compose the mosaic."""
    target = load_target(target_path, cfg.max_side)
    h, w = target.shape[:2]
    logger.info("Target: %dx%d = %d cells", w, h, w * h)

    catalog = build_catalog(tile_dir, cfg.TILE_EXTENSIONS)
    policy = SelectionPolicy.from_config(catalog, cfg, rng)
    loader = TileLoader(catalog.directory, cfg.tile_size, cache=cfg.cache_tiles)

    out_w, out_h = canvas_size(w, h, cfg.tile_size)
    logger.info(
        "Composing %dx%d canvas  (mode=%s, tile=%dpx)",
        out_w, out_h, policy.mode, cfg.tile_size,
    )
    t0 = time.perf_counter()
    canvas = compose_mosaic(target, policy, loader, cfg.tile_size, progress)
    logger.info(
        "Mosaic ready  (%.1f s, %d tile decodes)", time.perf_counter() - t0, loader.decodes,
    )
    return canvas
