"""Image loading, dominant-colour extraction, tile loading and saving."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from tile_mosaic.errors import ConfigurationError, ImageDecodeError

logger = logging.getLogger(__name__)


def _open_rgb(path: str | Path) -> Image.Image:
    try:
        with Image.open(path) as img:
            return img.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageDecodeError(f"Cannot decode image {path}: {exc}") from exc


def compute_target_size(
    original_width: int,
    original_height: int,
    max_side: int,
) -> tuple[int, int]:
    """Compute downscaled (w, h) preserving aspect ratio.

    The longest side becomes *max_side*; the other is scaled
    proportionally (rounded to the nearest integer, minimum 1).
    Images already within *max_side* are returned unchanged.
    """
    if max(original_width, original_height) <= max_side:
        return original_width, original_height
    if original_width >= original_height:
        w = max_side
        h = max(1, round(original_height * max_side / original_width))
    else:
        h = max_side
        w = max(1, round(original_width * max_side / original_height))
    return w, h


def load_target(path: str | Path, max_side: int | None = None) -> np.ndarray:
    """Load the target image, optionally shrinking it.

    Returns:
        (H, W, 3) uint8 array, one grid cell per pixel.
    """
    img = _open_rgb(path)
    if img.width == 0 or img.height == 0:
        raise ConfigurationError(f"Target image {path} has no pixels")
    if max_side is not None:
        w, h = compute_target_size(img.width, img.height, max_side)
        if (w, h) != img.size:
            logger.debug("Downsampling target %dx%d -> %dx%d", img.width, img.height, w, h)
            img = img.resize((w, h), Image.LANCZOS)
    return np.array(img, dtype=np.uint8)


def dominant_color(path: str | Path, num_colors: int = 8) -> tuple[int, int, int]:
    """Most populous colour of an image after median-cut quantisation.

    The image is thumbnailed first so large tiles stay cheap to analyse.
    """
    img = _open_rgb(path)
    img.thumbnail((128, 128))
    quantized = img.quantize(colors=num_colors, method=Image.Quantize.MEDIANCUT)
    counts = quantized.getcolors()
    palette = quantized.getpalette()
    if not counts or palette is None:
        raise ImageDecodeError(f"No colours found in {path}")
    _, index = max(counts, key=lambda c: c[0])
    r, g, b = palette[index * 3:index * 3 + 3]
    return int(r), int(g), int(b)


class TileLoader:
    """Load tile images by identifier, resized to the grid cell size.

    Decoded tiles are cached per identifier when *cache* is true; the
    output is identical either way.
    """

    def __init__(self, directory: str | Path, tile_size: int, cache: bool = True) -> None:
        self.directory = Path(directory)
        self.tile_size = tile_size
        self.cache = cache
        self._tiles: dict[str, Image.Image] = {}
        self.decodes = 0

    def __call__(self, identifier: str) -> Image.Image:
        if self.cache and identifier in self._tiles:
            return self._tiles[identifier]
        img = _open_rgb(self.directory / identifier)
        self.decodes += 1
        size = (self.tile_size, self.tile_size)
        if img.size != size:
            img = img.resize(size, Image.LANCZOS)
        if self.cache:
            self._tiles[identifier] = img
        return img


def save_png(canvas: Image.Image, path: str | Path) -> Path:
    """Encode *canvas* as PNG at *path*, creating parent folders."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    canvas.save(path, format="PNG")
    return path
