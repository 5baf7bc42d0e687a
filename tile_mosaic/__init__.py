"""
Tile Mosaic
===========

Recreate a target image from a folder of smaller images. Every target
pixel becomes one tile, chosen by the L1 distance between the pixel and
each tile's dominant colour. Three selection modes:

- **plain** - always the closest tile
- **mix** - the closest tile not used in the last few picks
- **random mix** - a random pick among the few closest tiles
"""

__version__ = "1.0.0"

from tile_mosaic.catalog import Tile, TileCatalog, build_catalog, collect_tile_files
from tile_mosaic.color_utils import l1_distances, rank_by_distance
from tile_mosaic.compositor import compose_mosaic, generate_mosaic
from tile_mosaic.config import MosaicConfig
from tile_mosaic.errors import ConfigurationError, ImageDecodeError, MosaicError
from tile_mosaic.image_io import (
    TileLoader,
    compute_target_size,
    dominant_color,
    load_target,
    save_png,
)
from tile_mosaic.selection import SelectionHistory, SelectionPolicy

__all__ = [
    "ConfigurationError",
    "ImageDecodeError",
    "MosaicConfig",
    "MosaicError",
    "SelectionHistory",
    "SelectionPolicy",
    "Tile",
    "TileCatalog",
    "TileLoader",
    "build_catalog",
    "collect_tile_files",
    "compose_mosaic",
    "compute_target_size",
    "dominant_color",
    "generate_mosaic",
    "l1_distances",
    "load_target",
    "rank_by_distance",
    "save_png",
]
