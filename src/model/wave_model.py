"""Implements the core WFC algorithm: entropy-driven collapse with constraint propagation."""

from __future__ import annotations

from collections import deque
import logging
from typing import NoReturn, TYPE_CHECKING

import numpy as np

from constants import ENTROPY_NOISE_MAX
from enums import Direction, WaveState
from model.pattern_catalog import PatternCatalogError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from numpy.typing import NDArray

    from model.pattern_catalog import PatternCatalog


logger = logging.getLogger(__name__)


class WFCContradiction(Exception):
    """Raised when WFC reaches an unsolvable state.

    This occurs when constraint propagation eliminates all possibilities for a cell. The wave model does not
    backtrack, so the run is abandoned and no partial pattern grid is returned. Retrying with another seed is up to
    the caller.

    Attributes:
        coords: The (row, col) coords of the cell whose domain became empty.
    """

    coords: tuple[int, int]

    def __init__(self, coords: tuple[int, int]) -> None:
        super().__init__(f"No possible patterns left at cell (row={coords[0]}, col={coords[1]}).")
        self.coords = coords


class WaveModel:
    """Solves an output pattern grid for a pattern catalog using the Wave Function Collapse algorithm.

    The wave stores, for every cell of the output pattern grid, which patterns are still possible there. Starting from
    the fully open wave, the model repeatedly picks the uncollapsed cell with the lowest weighted Shannon entropy,
    collapses it to a single pattern (sampled by weight) and propagates the consequences to the surrounding cells,
    until every cell holds exactly one pattern or some cell has no possible pattern left.

    A wave model performs exactly one run. All randomness (entropy tie-breaking and pattern sampling) comes from a
    generator owned by the instance, so two models with the same catalog and seed produce the same output.
    """

    # === CONSTRUCTOR PARAMETERS (initialized in __init__()) ===

    # Tile patterns, their weights and their adjacency rules. Only read, never modified.
    _catalog: PatternCatalog
    # (height, width) of the output pattern grid (in cells).
    _output_size: tuple[int, int]
    # Seed of the random number generator (None for a non-reproducible run).
    _seed: int | None
    # Random number generator used exclusively by this model.
    _rng: np.random.Generator

    # === PATTERN DATA (derived from the catalog in __init__()) ===

    # The number of patterns in the catalog.
    _pattern_count: int
    # Normalized weight of each pattern (used as entropy input and as sampling probability mass).
    _weights: NDArray[np.double]
    # w * ln(w) for each normalized pattern weight w (part of the Shannon entropy calculation).
    _weight_log_weights: NDArray[np.double]
    # For each direction value, the [p1, p2] array that is True if p2 may be placed next to p1 in that direction.
    _adjacency_rules_by_direction: list[NDArray[np.bool_]]

    # === WAVE STATE ===

    # 3D boolean array [row, col, pattern] which is True for each pattern that is still possible in a cell.
    _wave: NDArray[np.bool_]
    # Number of still possible patterns per cell.
    _possible_pattern_counts: NDArray[np.int_]
    # Sum of the weights of all still possible patterns per cell.
    _sums_of_possible_pattern_weights: NDArray[np.double]
    # Sum of w * ln(w) of all still possible patterns per cell.
    _sums_of_possible_pattern_weight_log_weights: NDArray[np.double]
    # The current lifecycle state of the model.
    _state: WaveState
    # True once run() has been called.
    _has_run: bool

    def __init__(
        self, catalog: PatternCatalog, output_width: int, output_height: int, seed: int | None = None
    ) -> None:
        """Initializes the fully open wave for the given catalog and output size.

        Args:
            catalog: Tile patterns, their weights and their adjacency rules, derived from the sample arrays.
            output_width: The width of the output pattern grid (in cells). Values below 1 are clamped to 1.
            output_height: The height of the output pattern grid (in cells). Values below 1 are clamped to 1.
            seed: Seed for the model's random number generator. If None or negative, the run is not reproducible.

        Raises:
            PatternCatalogError: If the catalog does not contain any patterns.
        """
        if catalog.pattern_count == 0:
            raise PatternCatalogError("Cannot create a wave model for an empty pattern catalog.")

        if output_width < 1 or output_height < 1:
            logger.warning(
                "Output size %dx%d clamped to at least 1x1 cells", output_width, output_height
            )

        self._catalog = catalog
        self._output_size = (max(1, output_height), max(1, output_width))
        self._seed = seed if seed is not None and seed >= 0 else None
        self._rng = np.random.default_rng(self._seed)

        self._pattern_count = catalog.pattern_count
        self._weights = catalog.get_weights_normalized()
        self._weight_log_weights = self._weights * np.log(self._weights)
        adjacency_rules = catalog.adjacency_rules
        self._adjacency_rules_by_direction = [
            np.ascontiguousarray(adjacency_rules[:, :, direction.value]) for direction in Direction
        ]

        self._wave = np.full((*self._output_size, self._pattern_count), True, dtype=bool)
        self._possible_pattern_counts = np.full(self._output_size, self._pattern_count, dtype=np.int_)
        self._sums_of_possible_pattern_weights = np.full(self._output_size, self._weights.sum(), dtype=np.double)
        self._sums_of_possible_pattern_weight_log_weights = np.full(
            self._output_size, self._weight_log_weights.sum(), dtype=np.double
        )

        self._state = WaveState.RUNNING
        self._has_run = False

    @property
    def output_width(self) -> int:
        """The width of the output pattern grid (in cells)."""
        return self._output_size[1]

    @property
    def output_height(self) -> int:
        """The height of the output pattern grid (in cells)."""
        return self._output_size[0]

    @property
    def seed(self) -> int | None:
        """The seed of the model's random number generator."""
        return self._seed

    @property
    def state(self) -> WaveState:
        """The current lifecycle state of the model."""
        return self._state

    @property
    def collapsed_cell_count(self) -> int:
        """The number of cells that hold exactly one pattern."""
        return int((self._possible_pattern_counts == 1).sum())

    def is_fully_collapsed(self) -> bool:
        """Returns True if every cell holds exactly one pattern."""
        return bool((self._possible_pattern_counts == 1).all())

    def get_possible_patterns(self, row: int, col: int) -> list[int]:
        """Returns the sorted indices of the patterns that are still possible in a cell."""
        return np.flatnonzero(self._wave[row, col]).tolist()

    def run(self) -> NDArray[np.int_]:
        """Runs the observe/collapse/propagate loop until the wave is solved or a contradiction occurs.

        Returns:
            The solved pattern grid of shape (output_height, output_width), where each element is the index of the
                pattern chosen for that cell.

        Raises:
            WFCContradiction: If some cell lost all of its possible patterns. No partial grid is returned.
            RuntimeError: If the model has already been run.
        """
        if self._has_run:
            raise RuntimeError("A wave model can only be run once. Create a new model for another attempt.")
        self._has_run = True

        logger.debug(
            "Running wave model: %dx%d cells, %d patterns, seed %s",
            self.output_width,
            self.output_height,
            self._pattern_count,
            self._seed,
        )

        # The first sweep makes every cell consistent with all of its neighbors.
        all_coords = [(row, col) for row in range(self._output_size[0]) for col in range(self._output_size[1])]
        contradiction_coords = self._propagate(all_coords)
        if contradiction_coords is not None:
            self._fail(contradiction_coords)

        collapse_steps = 0
        while True:
            empty_cells_coords = np.argwhere(self._possible_pattern_counts == 0)
            if len(empty_cells_coords) > 0:
                self._fail((int(empty_cells_coords[0][0]), int(empty_cells_coords[0][1])))

            next_coords = self._choose_next_cell()
            if next_coords is None:
                break

            self._collapse_cell_at(next_coords)
            collapse_steps += 1

            contradiction_coords = self._propagate([next_coords])
            if contradiction_coords is not None:
                self._fail(contradiction_coords)

        self._state = WaveState.SOLVED
        logger.debug("Wave model solved after %d collapse steps", collapse_steps)

        return np.argmax(self._wave, axis=2).astype(np.int_)

    def _fail(self, coords: tuple[int, int]) -> NoReturn:
        """Marks the run as failed and raises the contradiction found at the given cell."""
        self._state = WaveState.CONTRADICTION
        logger.warning(
            "Contradiction at cell %s after %d/%d collapsed cells (seed %s)",
            coords,
            self.collapsed_cell_count,
            self.output_width * self.output_height,
            self._seed,
        )
        raise WFCContradiction(coords)

    def _choose_next_cell(self) -> tuple[int, int] | None:
        """Returns the coords of the uncollapsed cell with the lowest entropy, or None if all cells are collapsed."""
        uncollapsed_cells = self._possible_pattern_counts > 1
        if not uncollapsed_cells.any():
            return None

        sums_of_weights = np.where(uncollapsed_cells, self._sums_of_possible_pattern_weights, 1.0)
        entropies = np.log(sums_of_weights) - (self._sums_of_possible_pattern_weight_log_weights / sums_of_weights)
        # Small random noise breaks ties between cells of equal entropy.
        entropies += self._rng.random(self._output_size) * ENTROPY_NOISE_MAX
        entropies[~uncollapsed_cells] = np.inf

        row, col = np.unravel_index(np.argmin(entropies), self._output_size)
        return int(row), int(col)

    def _collapse_cell_at(self, coords: tuple[int, int]) -> None:
        """Randomly picks the cell's pattern, weighed by pattern weight, and bans all other patterns."""
        possible_patterns = self._wave[coords]
        cumulative_weights = np.cumsum(np.where(possible_patterns, self._weights, 0.0))

        remaining = self._rng.random() * cumulative_weights[-1]
        pattern_index = int(np.searchsorted(cumulative_weights, remaining, side="right"))
        if pattern_index >= self._pattern_count or not possible_patterns[pattern_index]:
            # Rounding may push the sample past the last possible pattern.
            pattern_index = int(np.flatnonzero(possible_patterns)[-1])

        banned_patterns = possible_patterns.copy()
        banned_patterns[pattern_index] = False
        self._ban(coords, banned_patterns)

        logger.debug("Collapsed cell %s to pattern %d", coords, pattern_index)

    def _propagate(self, start_coords: Iterable[tuple[int, int]]) -> tuple[int, int] | None:
        """Removes patterns that lost all support from a neighbor, starting from the given cells.

        Returns:
            The coords of the first cell that lost all of its possible patterns, or None if no cell did.
        """
        queue = deque(start_coords)
        queued_coords = set(queue)

        while queue:
            coords = queue.popleft()
            queued_coords.discard(coords)
            possible_patterns = self._wave[coords]

            for direction in Direction:
                neighbor_row = coords[0] + direction.to_vector()[0]
                neighbor_col = coords[1] + direction.to_vector()[1]

                if (
                    neighbor_row < 0
                    or neighbor_row >= self._output_size[0]
                    or neighbor_col < 0
                    or neighbor_col >= self._output_size[1]
                ):
                    continue

                neighbor_coords = (neighbor_row, neighbor_col)

                # Patterns of the neighbor that are compatible with at least one still possible pattern of this cell.
                supported_patterns = self._adjacency_rules_by_direction[direction.value][possible_patterns].any(axis=0)
                unsupported_patterns = self._wave[neighbor_coords] & ~supported_patterns

                if not unsupported_patterns.any():
                    continue

                self._ban(neighbor_coords, unsupported_patterns)

                if self._possible_pattern_counts[neighbor_coords] == 0:
                    return neighbor_coords

                if neighbor_coords not in queued_coords:
                    queue.append(neighbor_coords)
                    queued_coords.add(neighbor_coords)

        return None

    def _ban(self, coords: tuple[int, int], banned_patterns: NDArray[np.bool_]) -> None:
        """Removes the given still possible patterns from a cell and updates the entropy sums."""
        self._wave[coords] &= ~banned_patterns
        self._possible_pattern_counts[coords] -= int(banned_patterns.sum())
        self._sums_of_possible_pattern_weights[coords] -= self._weights[banned_patterns].sum()
        self._sums_of_possible_pattern_weight_log_weights[coords] -= self._weight_log_weights[banned_patterns].sum()
