"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path

from tile_mosaic.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable -> MosaicConfig field
ENV_VARS: dict[str, str] = {
    "IMAGE_SIZE_IN_COLLAGE": "tile_size",
    "MIXING_LIMIT": "mixing_limit",
    "RANDOM_MAX_MIXING_DISTANCE": "random_max_mixing_distance",
}


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("%s=%r is not an integer, using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s=%r is not positive, using %d", name, raw, default)
        return default
    return value


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        tile_size:      Side in pixels of each tile on the output canvas.
        mixing_limit:   Repeat-avoidance window; the last ``mixing_limit - 1``
                        picks are excluded when ``mix`` is on.
        random_max_mixing_distance: Size of the top-K pool ``random_mix``
                        draws from.
        mix:            Avoid reusing recently chosen tiles.
        random_mix:     Pick randomly among the closest candidates.
        max_side:       Downsample the target so its longest side is at most
                        this many pixels (None = use the target as is).
        seed:           Random seed for ``random_mix`` (None = non-deterministic).
        cache_tiles:    Keep decoded tiles in memory between pixels.
        output_path:    Where the finished PNG is written.
    """

    # Grid
    tile_size: int = 40

    # Selection
    mixing_limit: int = 4
    random_max_mixing_distance: int = 3
    mix: bool = False
    random_mix: bool = False
    seed: int | None = None

    # Target
    max_side: int | None = None

    # Tiles
    cache_tiles: bool = True

    # Output
    output_path: Path = field(default_factory=lambda: Path("output.png"))

    TILE_EXTENSIONS: tuple[str, ...] = (".jpg", ".png")

    def __post_init__(self) -> None:
        for name in ("tile_size", "mixing_limit", "random_max_mixing_distance"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value}")
        if self.max_side is not None and self.max_side <= 0:
            raise ConfigurationError(
                f"max_side must be a positive integer, got {self.max_side}"
            )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: object,
    ) -> MosaicConfig:
        """Build a config from environment variables, then apply *overrides*.

        Missing, non-numeric or non-positive variables fall back to the
        field defaults. Overrides whose value is ``None`` are ignored so CLI
        options left unset keep the environment value.
        """
        environ = os.environ if environ is None else environ
        defaults = {f.name: f.default for f in fields(cls)}
        values: dict[str, object] = {
            attr: _env_int(environ, var, defaults[attr])  # type: ignore[arg-type]
            for var, attr in ENV_VARS.items()
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
