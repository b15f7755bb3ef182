"""Manages tile pattern data for the WFC algorithm."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from enums import Direction

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


logger = logging.getLogger(__name__)


class PatternCatalogError(Exception):
    """Raised when a pattern catalog cannot be built from its input or cannot answer a query.

    This occurs e.g. when a non-periodic sample is smaller than the pattern size (no patterns at all could be
    extracted) or when patterns are requested from a catalog that is still empty.
    """


class PatternCatalog:
    """Catalog of the NxN tile patterns found in one or more sample arrays.

    Patterns are extracted by sliding an NxN window over each sample array (wrapping around the borders if the input is
    periodic). Structurally equal windows are merged into one pattern whose weight counts its occurrences. After every
    ingested sample the adjacency rules are recomputed by checking if the (N-1)xN / Nx(N-1) overlap regions of every
    ordered pair of patterns match exactly. The catalog serves as the read-only source of patterns, weights and
    adjacency rules for the wave model and turns a solved pattern grid back into a tile grid.

    Attributes:
        pattern_size: The width and height of the square patterns extracted (in tiles), clamped to at least 1.
        periodic_input: If True, the sample arrays are treated as toroidal when extracting patterns.
        sample_count: The number of sample arrays ingested so far.
    """

    pattern_size: int
    periodic_input: bool
    sample_count: int

    # The unique pattern objects in order of discovery, where the index corresponds to the pattern ID.
    _patterns: list[_Pattern]
    # Maps the byte representation of a tile arrangement to its pattern (content-based pattern identity).
    _patterns_by_key: dict[bytes, _Pattern]
    # The 3D boolean array defining compatibility: [p1, p2, direction] is True exactly if pattern p2 can be placed next
    # to pattern p1 in the specified direction.
    _adjacency_rules: NDArray[np.bool_]

    def __init__(self, pattern_size: int, periodic_input: bool = True) -> None:
        """Initializes an empty catalog.

        Args:
            pattern_size: The width and height of the square patterns to extract (in tiles). Values below 1 are
                clamped to 1.
            periodic_input: If True, patterns are also extracted across the borders of the sample arrays.
        """
        self.pattern_size = max(1, int(pattern_size))
        self.periodic_input = periodic_input
        self.sample_count = 0

        self._patterns = []
        self._patterns_by_key = {}
        self._adjacency_rules = np.zeros((0, 0, len(Direction)), dtype=bool)

    @property
    def pattern_count(self) -> int:
        """The total number of unique patterns discovered."""
        return len(self._patterns)

    @property
    def adjacency_rules(self) -> NDArray[np.bool_]:
        """A read-only view of the [p1, p2, direction] compatibility array."""
        adjacency_rules = self._adjacency_rules.view()
        adjacency_rules.flags.writeable = False
        return adjacency_rules

    def build_from_input(self, sample_array: ArrayLike) -> None:
        """Extracts and counts the patterns of a sample array and recomputes the adjacency rules.

        Can be called once per sample to merge several samples (of possibly different sizes) into one shared catalog.
        Patterns already known only get their weight increased.

        Args:
            sample_array: A 2D array of non-negative tile IDs.

        Raises:
            PatternCatalogError: If the sample is not a non-empty 2D array of non-negative integers, or if it is too
                small to contain a single pattern under non-periodic extraction.
        """
        sample_array = self._validate_sample_array(sample_array)

        pattern_count_before = self.pattern_count
        patch_count = self._extract_and_count_patterns(sample_array)
        self.sample_count += 1

        self._determine_adjacency_rules()

        logger.info(
            "Ingested sample %d (%dx%d): %d patches, %d new patterns, %d patterns in total",
            self.sample_count,
            sample_array.shape[1],
            sample_array.shape[0],
            patch_count,
            self.pattern_count - pattern_count_before,
            self.pattern_count,
        )

    def get_weights(self) -> NDArray[np.int_]:
        """Returns the occurrence count of every pattern, indexed by pattern ID."""
        return np.array([pattern._frequency for pattern in self._patterns], dtype=np.int_)

    def get_weight(self, pattern_index: int) -> int:
        """Returns the occurrence count of the pattern with the given index."""
        return self._get_pattern(pattern_index)._frequency

    def get_weights_normalized(self) -> NDArray[np.double]:
        """Returns the probability mass of every pattern (the weights divided by their sum).

        Raises:
            PatternCatalogError: If the catalog does not contain any patterns yet.
        """
        if not self._patterns:
            raise PatternCatalogError("Cannot normalize the weights of an empty pattern catalog.")
        weights = self.get_weights().astype(np.double)
        return weights / weights.sum()

    def get_pattern(self, pattern_index: int) -> NDArray[np.int_]:
        """Returns a copy of the NxN tile arrangement of the pattern with the given index."""
        return self._get_pattern(pattern_index)._tile_arrangement.copy()

    def get_compatible_patterns(self, pattern_index: int, direction: Direction) -> list[int]:
        """Returns all compatible pattern indices for a pattern and direction.

        Returns a list of all pattern indices that can legally be placed adjacent to the pattern with the specified
        index in the specified direction, based on the precalculated adjacency rules matrix.

        Args:
            pattern_index: The index of the pattern to check compatibility for.
            direction: The direction to check compatibility for.

        Returns:
            A list of all pattern indices that can legally be placed adjacent to the pattern with the specified index
                in the specified direction.
        """
        self._get_pattern(pattern_index)
        return np.flatnonzero(self._adjacency_rules[pattern_index, :, direction.value]).tolist()

    def is_compatible(self, pattern_index: int, other_pattern_index: int, direction: Direction) -> bool:
        """Returns True if the other pattern may be placed one step from the pattern in the given direction."""
        self._get_pattern(pattern_index)
        self._get_pattern(other_pattern_index)
        return bool(self._adjacency_rules[pattern_index, other_pattern_index, direction.value])

    def reconstruct_from_pattern_grid(
        self, width: int, height: int, pattern_grid: ArrayLike
    ) -> NDArray[np.int_]:
        """Converts a grid of pattern indices into a grid of tile IDs.

        Each pattern grid cell stamps the full NxN tile arrangement of its pattern at the matching offset of the
        output, in row-major order. Overlap zones are overwritten by later stamps; they are expected to agree because
        the wave model only places compatible patterns next to each other, which is not verified here.

        Args:
            width: The width of the pattern grid (in cells).
            height: The height of the pattern grid (in cells).
            pattern_grid: A 2D array of shape (height, width) where each element is a pattern index.

        Returns:
            A 2D array of tile IDs of shape (height + N - 1, width + N - 1).

        Raises:
            ValueError: If the size is not positive or the pattern grid does not have the shape (height, width).
            PatternCatalogError: If the pattern grid references a pattern index that is not part of the catalog.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Pattern grid size must be positive, got {width}x{height}.")

        pattern_grid = np.asarray(pattern_grid)
        if pattern_grid.shape != (height, width):
            raise ValueError(
                f"Pattern grid has shape {pattern_grid.shape}, expected (height, width) = {(height, width)}."
            )
        if pattern_grid.min() < 0 or pattern_grid.max() >= self.pattern_count:
            raise PatternCatalogError(
                f"Pattern grid references indices outside of [0, {self.pattern_count}) "
                f"(found {pattern_grid.min()}..{pattern_grid.max()})."
            )

        size = self.pattern_size
        tilemap = np.zeros((height + size - 1, width + size - 1), dtype=np.int_)
        for row in range(height):
            for col in range(width):
                pattern = self._patterns[int(pattern_grid[row, col])]
                tilemap[row : row + size, col : col + size] = pattern._tile_arrangement
        return tilemap

    def _validate_sample_array(self, sample_array: ArrayLike) -> NDArray[np.int_]:
        """Checks that a sample is usable for pattern extraction and converts it to an int array."""
        array = np.asarray(sample_array)

        if array.ndim != 2 or array.size == 0:
            raise PatternCatalogError(f"Sample must be a non-empty 2D array, got shape {array.shape}.")
        if not np.issubdtype(array.dtype, np.integer):
            raise PatternCatalogError(f"Sample must contain integer tile IDs, got dtype {array.dtype}.")
        if (array < 0).any():
            raise PatternCatalogError("Sample must only contain non-negative tile IDs.")

        rows, cols = array.shape
        if not self.periodic_input and (rows < self.pattern_size or cols < self.pattern_size):
            raise PatternCatalogError(
                f"Non-periodic sample of size {cols}x{rows} is smaller than the pattern size {self.pattern_size}, "
                "so no patterns can be extracted from it."
            )

        return array.astype(np.int_)

    def _extract_and_count_patterns(self, sample_array: NDArray[np.int_]) -> int:
        """Extracts all NxN patterns of a sample, counts their frequency and returns the number of patches."""
        rows, cols = sample_array.shape
        size = self.pattern_size

        if self.periodic_input:
            # Wrap the sample around its borders so that every cell is the top-left corner of a full NxN patch.
            row_indices = np.arange(rows + size - 1) % rows
            col_indices = np.arange(cols + size - 1) % cols
            source_array = sample_array[np.ix_(row_indices, col_indices)]
            start_rows, start_cols = rows, cols
        else:
            source_array = sample_array
            start_rows, start_cols = rows - size + 1, cols - size + 1

        for row in range(start_rows):
            for col in range(start_cols):
                tile_arrangement = source_array[row : row + size, col : col + size]
                key = self._hash_tile_arrangement(tile_arrangement)

                if key not in self._patterns_by_key:
                    new_pattern = _Pattern(self.pattern_count, tile_arrangement)
                    self._patterns.append(new_pattern)
                    self._patterns_by_key[key] = new_pattern
                else:
                    self._patterns_by_key[key]._frequency += 1

        return start_rows * start_cols

    def _determine_adjacency_rules(self) -> None:
        """Calculates compatibility by checking overlapping pattern regions."""
        pattern_count = self.pattern_count
        tile_arrangements = np.array([pattern._tile_arrangement for pattern in self._patterns], dtype=np.int_)

        # For each direction, the strip of p1 and the strip of p2 that have to match for p2 to be placed next to p1.
        overlaps = {
            # LEFT: p1's left N-1 columns must match p2's right N-1 columns.
            Direction.LEFT: (tile_arrangements[:, :, :-1], tile_arrangements[:, :, 1:]),
            # RIGHT: p1's right N-1 columns must match p2's left N-1 columns.
            Direction.RIGHT: (tile_arrangements[:, :, 1:], tile_arrangements[:, :, :-1]),
            # UP: p1's top N-1 rows must match p2's bottom N-1 rows.
            Direction.UP: (tile_arrangements[:, :-1, :], tile_arrangements[:, 1:, :]),
            # DOWN: p1's bottom N-1 rows must match p2's top N-1 rows.
            Direction.DOWN: (tile_arrangements[:, 1:, :], tile_arrangements[:, :-1, :]),
        }

        self._adjacency_rules = np.full((pattern_count, pattern_count, len(Direction)), False, dtype=bool)
        for direction, (own_strips, other_strips) in overlaps.items():
            strip_length = own_strips.shape[1] * own_strips.shape[2]
            own_strips_flat = own_strips.reshape(pattern_count, strip_length)
            other_strips_flat = other_strips.reshape(pattern_count, strip_length)
            # With N = 1 the strips are empty, so every pair is compatible.
            self._adjacency_rules[:, :, direction.value] = (
                own_strips_flat[:, np.newaxis, :] == other_strips_flat[np.newaxis, :, :]
            ).all(axis=2)

        logger.debug("Determined adjacency rules for %d patterns", pattern_count)

    def _get_pattern(self, pattern_index: int) -> _Pattern:
        """Returns the pattern with the given index or raises if it does not exist."""
        if not 0 <= pattern_index < self.pattern_count:
            raise PatternCatalogError(
                f"Pattern index {pattern_index} is out of range for a catalog of {self.pattern_count} patterns."
            )
        return self._patterns[pattern_index]

    def _hash_tile_arrangement(self, array: NDArray[np.int_]) -> bytes:
        """Generates a unique key for a pattern's tile arrangement."""
        return np.ascontiguousarray(array, dtype=np.int64).tobytes()


class _Pattern:
    """Internal class to represent a single unique NxN tile pattern."""

    # The unique integer ID for this pattern.
    _index: int
    # The NxN array of tile IDs that define the pattern.
    _tile_arrangement: NDArray[np.int_]
    # The number of times this pattern was found in the sample arrays.
    _frequency: int

    def __init__(self, index: int, tile_arrangement: NDArray[np.int_]) -> None:
        """Initializes a pattern object. Frequency starts at 1 upon creation."""
        self._index = index
        self._tile_arrangement = tile_arrangement.copy()
        self._frequency = 1
