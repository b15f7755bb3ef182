from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from model.map_io import load_sample_csv
from model.pattern_catalog import PatternCatalog

SAMPLES_FOLDER = Path(__file__).resolve().parent.parent / "assets" / "samples"


@pytest.fixture
def samples_folder() -> Path:
    """The folder of the sample tilemaps shipped with the application."""
    return SAMPLES_FOLDER


@pytest.fixture
def cavern_sample() -> np.ndarray:
    """The 12x12 cavern sample (sand, grass and water)."""
    return load_sample_csv(SAMPLES_FOLDER / "cavern_12x12.csv")


@pytest.fixture
def quad_catalog() -> PatternCatalog:
    """Periodic 2x2 catalog of a 2x2 sample with four distinct tiles.

    Every pattern has exactly one allowed neighbor per direction, so any output tiles the sample periodically.
    """
    catalog = PatternCatalog(2, periodic_input=True)
    catalog.build_from_input(np.array([[0, 1], [2, 3]]))
    return catalog


@pytest.fixture
def dead_end_catalog() -> PatternCatalog:
    """Non-periodic catalog with the patterns A = [[0, 1], [0, 1]] and B = [[1, 2], [1, 2]].

    Only B may be placed right of A, and nothing may be placed right of B. Outputs that are two cells wide are always
    solvable, wider outputs never are.
    """
    catalog = PatternCatalog(2, periodic_input=False)
    catalog.build_from_input(np.array([[0, 1, 2], [0, 1, 2]]))
    return catalog
