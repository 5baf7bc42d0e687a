"""Tile catalog: every candidate tile and its dominant colour."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from tile_mosaic.color_utils import rank_by_distance
from tile_mosaic.errors import ConfigurationError
from tile_mosaic.image_io import dominant_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tile:
    """One candidate image: its file name and dominant RGB colour."""

    identifier: str
    dominant_color: tuple[int, int, int]

    def __post_init__(self) -> None:
        if len(self.dominant_color) != 3 or not all(
            0 <= int(c) <= 255 for c in self.dominant_color
        ):
            raise ValueError(f"Invalid RGB colour for {self.identifier}: {self.dominant_color}")


@dataclass(frozen=True)
class TileCatalog:
    """Ordered, immutable collection of tiles.

    Attributes:
        tiles:     Tiles in catalog order (ties in ranking resolve to this order).
        directory: Folder the tile images are loaded from.
    """

    tiles: tuple[Tile, ...]
    directory: Path = field(default_factory=Path)
    colors: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.tiles:
            raise ConfigurationError(f"No usable tile images in {self.directory}")
        colors = np.array([t.dominant_color for t in self.tiles], dtype=np.int32)
        colors.setflags(write=False)
        object.__setattr__(self, "colors", colors)

    @classmethod
    def from_tiles(cls, tiles: Iterable[Tile], directory: str | Path = ".") -> TileCatalog:
        return cls(tuple(tiles), Path(directory))

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __getitem__(self, index: int) -> Tile:
        return self.tiles[index]

    def rank(self, color: Sequence[int] | np.ndarray) -> list[Tile]:
        """All tiles, closest to *color* first."""
        return [self.tiles[i] for i in rank_by_distance(self.colors, color)]


def collect_tile_files(folder: Path, extensions: Sequence[str]) -> list[Path]:
    """Files in *folder* whose names end with one of *extensions*.

    Matching is case-sensitive. Results are sorted by name.
    """
    suffixes = tuple(extensions)
    return sorted(
        f for f in Path(folder).iterdir()
        if f.is_file() and f.name.endswith(suffixes)
    )


def build_catalog(
    folder: str | Path,
    extensions: Sequence[str] = (".jpg", ".png"),
) -> TileCatalog:
    """Scan *folder* and extract the dominant colour of every tile image."""
    folder = Path(folder)
    files = collect_tile_files(folder, extensions)
    logger.info("Found %d tile images in %s", len(files), folder)
    if not files:
        raise ConfigurationError(
            f"No {' / '.join(extensions)} files found in {folder}"
        )

    t0 = time.perf_counter()
    tiles = []
    for path in files:
        color = dominant_color(path)
        logger.debug("  %s -> rgb%s", path.name, color)
        tiles.append(Tile(path.name, color))
    logger.info("Analysed %d tiles  (%.1f s)", len(tiles), time.perf_counter() - t0)
    return TileCatalog(tuple(tiles), folder)
