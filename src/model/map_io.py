"""Loads sample tile arrays from CSV files and exports generated tilemaps."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

import constants
from model.map_labeler import get_difficulty

if TYPE_CHECKING:
    from numpy.typing import NDArray


logger = logging.getLogger(__name__)


class MapFormatError(Exception):
    """Raised when a CSV file does not contain a rectangular grid of integer tile IDs."""


def load_sample_csv(file_path: str | Path) -> NDArray[np.int_]:
    """Loads a single sample array from a CSV file of comma separated tile IDs.

    Blank lines are ignored and whitespace around the values is stripped. Rows are read top to bottom, so the first
    line of the file becomes row 0 of the array.

    Args:
        file_path: The path of the CSV file.

    Returns:
        The 2D array of tile IDs.

    Raises:
        MapFormatError: If the file cannot be read, is empty, has rows of different lengths or non-integer values.
    """
    file_path = Path(file_path)
    try:
        lines = [line for line in file_path.read_text(encoding="utf-8").splitlines() if line.strip()]
    except OSError as exc:
        raise MapFormatError(f"Cannot read sample file {file_path}: {exc}") from exc

    if not lines:
        raise MapFormatError(f"Sample file {file_path} is empty.")

    rows = [[value.strip() for value in line.split(",")] for line in lines]
    row_lengths = {len(row) for row in rows}
    if len(row_lengths) != 1:
        raise MapFormatError(f"Sample file {file_path} has rows of different lengths {sorted(row_lengths)}.")

    try:
        sample_array = np.array(rows, dtype=str).astype(np.int_)
    except ValueError as exc:
        raise MapFormatError(f"Sample file {file_path} contains a value that is not an integer: {exc}") from exc

    logger.debug("Loaded %dx%d sample from %s", sample_array.shape[1], sample_array.shape[0], file_path)
    return sample_array


def load_all_samples(folder_path: str | Path) -> list[NDArray[np.int_]]:
    """Loads every CSV file located directly in a folder, in file name order.

    Files that cannot be parsed are logged and skipped.

    Args:
        folder_path: The folder containing the sample CSV files.

    Returns:
        The list of loaded sample arrays (possibly of different sizes).

    Raises:
        MapFormatError: If the folder does not exist.
    """
    folder_path = Path(folder_path)
    if not folder_path.is_dir():
        raise MapFormatError(f"Sample folder {folder_path} does not exist.")

    sample_arrays = []
    for file_path in sorted(folder_path.glob("*.csv")):
        try:
            sample_arrays.append(load_sample_csv(file_path))
        except MapFormatError as exc:
            logger.error("Skipping sample: %s", exc)

    logger.info("Loaded %d samples from %s", len(sample_arrays), folder_path)
    return sample_arrays


def save_tilemap_csv(tilemap: NDArray[np.int_], file_path: str | Path) -> None:
    """Saves a tilemap as a CSV file with one row of comma separated tile IDs per line.

    Missing parent folders are created.
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    np.savetxt(file_path, tilemap, fmt="%i", delimiter=",")
    logger.info("Saved tilemap to %s", file_path)


def save_labeled_csv(
    tilemap: NDArray[np.int_], file_path: str | Path, hazard_tile: int = constants.HAZARD_TILE_DEFAULT
) -> None:
    """Saves a tilemap as a CSV file preceded by a line holding its difficulty label.

    Args:
        tilemap: The 2D array of tile IDs.
        file_path: The destination path. Missing parent folders are created.
        hazard_tile: The tile ID counted to determine the difficulty.
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    difficulty = get_difficulty(tilemap, hazard_tile)
    np.savetxt(file_path, tilemap, fmt="%i", delimiter=",", header=str(difficulty.value), comments="")
    logger.info("Saved tilemap labeled %s to %s", difficulty.name, file_path)
