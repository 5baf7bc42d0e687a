"""Tile selection: nearest match, repeat avoidance and random mixing.

For every target pixel the catalog is ranked by L1 colour distance and
one tile is picked:

- **plain**: the closest tile.
- **mix**: the closest tile not among the last ``mixing_limit - 1`` picks.
  When every tile is excluded the exclusion is dropped.
- **random_mix**: a uniform draw among the first
  ``random_max_mixing_distance`` candidates (after the ``mix`` filter when
  both are on).

The random draw goes through an injected source so runs can be replayed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

import numpy as np

from tile_mosaic.catalog import Tile, TileCatalog
from tile_mosaic.config import MosaicConfig

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything with ``numpy.random.Generator.integers``' call shape."""

    def integers(self, high: int) -> int: ...


class SelectionHistory:
    """Identifiers chosen so far, oldest first."""

    def __init__(self) -> None:
        self.entries: list[str] = []

    def __len__(self) -> int:
        return len(self.entries)

    def append(self, identifier: str) -> None:
        self.entries.append(identifier)

    def recent(self, count: int) -> list[str]:
        """The last *count* identifiers (fewer early in a run)."""
        if count <= 0:
            return []
        return self.entries[-count:]


class SelectionPolicy:
    """Resolve a target colour to one tile of *catalog*."""

    def __init__(
        self,
        catalog: TileCatalog,
        mix: bool = False,
        random_mix: bool = False,
        mixing_limit: int = 4,
        random_max_mixing_distance: int = 3,
        rng: RandomSource | None = None,
    ) -> None:
        self.catalog = catalog
        self.mix = mix
        self.random_mix = random_mix
        self.mixing_limit = mixing_limit
        self.random_max_mixing_distance = random_max_mixing_distance
        self.rng = rng if rng is not None else np.random.default_rng()
        self.history = SelectionHistory()

    @classmethod
    def from_config(
        cls,
        catalog: TileCatalog,
        cfg: MosaicConfig,
        rng: RandomSource | None = None,
    ) -> SelectionPolicy:
        if rng is None:
            rng = np.random.default_rng(cfg.seed)
        return cls(
            catalog,
            mix=cfg.mix,
            random_mix=cfg.random_mix,
            mixing_limit=cfg.mixing_limit,
            random_max_mixing_distance=cfg.random_max_mixing_distance,
            rng=rng,
        )

    @property
    def mode(self) -> str:
        if self.mix and self.random_mix:
            return "mix+random"
        if self.random_mix:
            return "random"
        return "mix" if self.mix else "plain"

    def candidates(self, color: Sequence[int] | np.ndarray) -> list[Tile]:
        """Ranked tiles still eligible for *color*, closest first."""
        ranked = self.catalog.rank(color)
        if not self.mix:
            return ranked
        excluded = set(self.history.recent(self.mixing_limit - 1))
        eligible = [t for t in ranked if t.identifier not in excluded]
        if not eligible:
            logger.debug("All %d tiles recently used, ignoring repeat window", len(ranked))
            return ranked
        return eligible

    def select(self, color: Sequence[int] | np.ndarray) -> Tile:
        """Pick the tile for one pixel. Does not touch the history."""
        eligible = self.candidates(color)
        if not self.random_mix:
            return eligible[0]
        pool = eligible[:self.random_max_mixing_distance]
        return pool[int(self.rng.integers(len(pool)))]

    def record(self, tile: Tile) -> None:
        """Remember *tile* as the latest pick when mixing is enabled."""
        if self.mix or self.random_mix:
            self.history.append(tile.identifier)
