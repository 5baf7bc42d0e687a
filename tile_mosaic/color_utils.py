"""Colour distance and candidate ranking."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def as_rgb_array(colors: Sequence[Sequence[int]] | np.ndarray) -> np.ndarray:
    """Coerce colours to an (N, 3) int32 array."""
    arr = np.asarray(colors, dtype=np.int32)
    return arr.reshape(-1, 3)


def l1_distances(
    colors: np.ndarray,
    target: Sequence[int] | np.ndarray,
) -> np.ndarray:
    """Manhattan distance from each colour to *target*.

    Args:
        colors: (N, 3) RGB.
        target: a single RGB triple.

    Returns:
        (N,) int32 array of ``|r - tr| + |g - tg| + |b - tb|``.
    """
    t = np.asarray(target, dtype=np.int32)[:3]
    return np.abs(as_rgb_array(colors) - t).sum(axis=1)


def rank_by_distance(
    colors: np.ndarray,
    target: Sequence[int] | np.ndarray,
) -> np.ndarray:
    """Indices of *colors* ordered from closest to farthest from *target*.

    The sort is stable, so tiles at equal distance keep their catalog order.
    """
    return np.argsort(l1_distances(colors, target), kind="stable")
