"""Tests for the hazard-based difficulty labels."""

from __future__ import annotations

import numpy as np
import pytest

from enums import MapDifficulty
from model.map_labeler import count_hazards, get_difficulty


def tilemap_with_hazards(hazards: int, hazard_tile: int = 2) -> np.ndarray:
    tilemap = np.ones((4, 4), dtype=int)
    tilemap.flat[:hazards] = hazard_tile
    return tilemap


def test_count_hazards() -> None:
    assert count_hazards([[0, 2, 2], [1, 2, 0]]) == 3
    assert count_hazards([[0, 2, 2], [1, 2, 0]], hazard_tile=0) == 2


@pytest.mark.parametrize(
    ("hazards", "difficulty"),
    [
        (0, MapDifficulty.EASY),
        (2, MapDifficulty.EASY),
        (3, MapDifficulty.MEDIUM),
        (6, MapDifficulty.MEDIUM),
        (7, MapDifficulty.HARD),
        (16, MapDifficulty.HARD),
    ],
)
def test_difficulty_thresholds(hazards: int, difficulty: MapDifficulty) -> None:
    assert get_difficulty(tilemap_with_hazards(hazards)) is difficulty


def test_custom_hazard_tile() -> None:
    tilemap = tilemap_with_hazards(5, hazard_tile=0)

    assert get_difficulty(tilemap) is MapDifficulty.EASY
    assert get_difficulty(tilemap, hazard_tile=0) is MapDifficulty.MEDIUM
