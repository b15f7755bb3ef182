"""Assigns difficulty labels to tilemaps."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

import constants
from enums import MapDifficulty

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


def count_hazards(tilemap: ArrayLike, hazard_tile: int = constants.HAZARD_TILE_DEFAULT) -> int:
    """Returns how many tiles of the tilemap have the hazard tile ID."""
    return int(np.count_nonzero(np.asarray(tilemap) == hazard_tile))


def get_difficulty(tilemap: ArrayLike, hazard_tile: int = constants.HAZARD_TILE_DEFAULT) -> MapDifficulty:
    """Labels a tilemap by the number of hazard tiles it contains.

    Args:
        tilemap: The 2D array of tile IDs.
        hazard_tile: The tile ID that makes a map harder (water by default).

    Returns:
        EASY for at most two hazard tiles, MEDIUM for at most six and HARD otherwise.
    """
    hazards = count_hazards(tilemap, hazard_tile)
    if hazards <= constants.DIFFICULTY_EASY_MAX_HAZARDS:
        return MapDifficulty.EASY
    if hazards <= constants.DIFFICULTY_MEDIUM_MAX_HAZARDS:
        return MapDifficulty.MEDIUM
    return MapDifficulty.HARD
