"""Tests for pattern extraction, weighting and adjacency rules of the PatternCatalog."""

from __future__ import annotations

import numpy as np
import pytest

from enums import Direction
from model.pattern_catalog import PatternCatalog, PatternCatalogError


def find_pattern(catalog: PatternCatalog, tile_arrangement: list[list[int]]) -> int:
    """Returns the index of the pattern with the given tile arrangement."""
    for pattern_index in range(catalog.pattern_count):
        if np.array_equal(catalog.get_pattern(pattern_index), tile_arrangement):
            return pattern_index
    raise AssertionError(f"Pattern {tile_arrangement} not in catalog")


# =============================================================================
# Pattern Extraction
# =============================================================================


class TestPatternExtraction:
    """Tests for extracting and counting patterns."""

    def test_periodic_distinct_tiles_yield_one_pattern_per_cell(self, quad_catalog: PatternCatalog) -> None:
        assert quad_catalog.pattern_count == 4
        assert quad_catalog.get_weights().tolist() == [1, 1, 1, 1]

    def test_periodic_patterns_wrap_around_borders(self, quad_catalog: PatternCatalog) -> None:
        find_pattern(quad_catalog, [[0, 1], [2, 3]])
        find_pattern(quad_catalog, [[1, 0], [3, 2]])
        find_pattern(quad_catalog, [[2, 3], [0, 1]])
        find_pattern(quad_catalog, [[3, 2], [1, 0]])

    def test_periodic_checkerboard_merges_equal_windows(self) -> None:
        """A 2x2 checkerboard only contains two distinct windows, each found twice."""
        catalog = PatternCatalog(2, periodic_input=True)
        catalog.build_from_input(np.array([[0, 1], [1, 0]]))

        assert catalog.pattern_count == 2
        assert catalog.get_weights().tolist() == [2, 2]

    def test_non_periodic_patterns_stay_inside_sample(self) -> None:
        catalog = PatternCatalog(2, periodic_input=False)
        catalog.build_from_input(np.arange(9).reshape(3, 3))

        assert catalog.pattern_count == 4
        find_pattern(catalog, [[0, 1], [3, 4]])
        find_pattern(catalog, [[4, 5], [7, 8]])

    def test_weights_count_occurrences(self) -> None:
        catalog = PatternCatalog(1)
        catalog.build_from_input(np.array([[0, 0, 0], [0, 1, 0], [0, 0, 2]]))

        weights = {int(catalog.get_pattern(i)[0, 0]): catalog.get_weight(i) for i in range(catalog.pattern_count)}
        assert weights == {0: 7, 1: 1, 2: 1}
        assert catalog.get_weights().sum() == 9

    def test_normalized_weights_sum_to_one(self, cavern_sample: np.ndarray) -> None:
        catalog = PatternCatalog(3)
        catalog.build_from_input(cavern_sample)

        normalized_weights = catalog.get_weights_normalized()
        assert normalized_weights.sum() == pytest.approx(1.0)
        assert (normalized_weights > 0).all()

    def test_periodic_patch_count_equals_sample_size(self, cavern_sample: np.ndarray) -> None:
        catalog = PatternCatalog(3, periodic_input=True)
        catalog.build_from_input(cavern_sample)

        assert catalog.get_weights().sum() == cavern_sample.size

    def test_non_periodic_patch_count(self, cavern_sample: np.ndarray) -> None:
        catalog = PatternCatalog(3, periodic_input=False)
        catalog.build_from_input(cavern_sample)

        assert catalog.get_weights().sum() == (cavern_sample.shape[0] - 2) * (cavern_sample.shape[1] - 2)

    def test_multiple_samples_are_merged(self) -> None:
        catalog = PatternCatalog(1)
        catalog.build_from_input(np.array([[0, 1]]))
        catalog.build_from_input(np.array([[1, 1, 2]]))

        assert catalog.sample_count == 2
        assert catalog.pattern_count == 3
        assert catalog.get_weight(find_pattern(catalog, [[1]])) == 3

    def test_patterns_are_independent_of_sample(self) -> None:
        sample = np.array([[0, 1], [1, 0]])
        catalog = PatternCatalog(2)
        catalog.build_from_input(sample)
        pattern_before = catalog.get_pattern(0)

        sample[:] = 5
        catalog.get_pattern(0)[:] = 7

        assert np.array_equal(catalog.get_pattern(0), pattern_before)

    def test_pattern_size_is_clamped(self) -> None:
        assert PatternCatalog(0).pattern_size == 1
        assert PatternCatalog(-4).pattern_size == 1


class TestInvalidSamples:
    """Tests for rejected sample arrays."""

    def test_non_periodic_sample_smaller_than_pattern_size(self) -> None:
        catalog = PatternCatalog(3, periodic_input=False)
        with pytest.raises(PatternCatalogError):
            catalog.build_from_input(np.zeros((2, 5), dtype=int))
        assert catalog.sample_count == 0

    def test_periodic_sample_smaller_than_pattern_size_is_allowed(self) -> None:
        catalog = PatternCatalog(3, periodic_input=True)
        catalog.build_from_input(np.array([[0, 1]]))

        assert catalog.pattern_count == 2

    @pytest.mark.parametrize(
        "sample",
        [
            np.array([0, 1, 2]),
            np.zeros((0, 3), dtype=int),
            np.array([[0.5, 1.0], [1.0, 0.0]]),
            np.array([[0, -1], [1, 0]]),
        ],
        ids=["1d", "empty", "float", "negative"],
    )
    def test_invalid_sample_raises(self, sample: np.ndarray) -> None:
        with pytest.raises(PatternCatalogError):
            PatternCatalog(2).build_from_input(sample)

    def test_normalizing_empty_catalog_raises(self) -> None:
        with pytest.raises(PatternCatalogError):
            PatternCatalog(2).get_weights_normalized()

    def test_unknown_pattern_index_raises(self, quad_catalog: PatternCatalog) -> None:
        with pytest.raises(PatternCatalogError):
            quad_catalog.get_pattern(4)
        with pytest.raises(PatternCatalogError):
            quad_catalog.get_compatible_patterns(-1, Direction.UP)


# =============================================================================
# Adjacency Rules
# =============================================================================


class TestAdjacencyRules:
    """Tests for the overlap-based compatibility of patterns."""

    def test_overlap_in_every_direction(self, quad_catalog: PatternCatalog) -> None:
        p0 = find_pattern(quad_catalog, [[0, 1], [2, 3]])
        p1 = find_pattern(quad_catalog, [[1, 0], [3, 2]])
        p2 = find_pattern(quad_catalog, [[2, 3], [0, 1]])

        assert quad_catalog.get_compatible_patterns(p0, Direction.RIGHT) == [p1]
        assert quad_catalog.get_compatible_patterns(p0, Direction.LEFT) == [p1]
        assert quad_catalog.get_compatible_patterns(p0, Direction.DOWN) == [p2]
        assert quad_catalog.get_compatible_patterns(p0, Direction.UP) == [p2]
        assert not quad_catalog.is_compatible(p0, p0, Direction.RIGHT)

    def test_one_sided_compatibility(self, dead_end_catalog: PatternCatalog) -> None:
        a = find_pattern(dead_end_catalog, [[0, 1], [0, 1]])
        b = find_pattern(dead_end_catalog, [[1, 2], [1, 2]])

        assert dead_end_catalog.is_compatible(a, b, Direction.RIGHT)
        assert not dead_end_catalog.is_compatible(b, a, Direction.RIGHT)
        assert dead_end_catalog.is_compatible(b, a, Direction.LEFT)
        assert dead_end_catalog.get_compatible_patterns(b, Direction.RIGHT) == []
        assert dead_end_catalog.is_compatible(a, a, Direction.UP)

    def test_rules_are_symmetric(self, cavern_sample: np.ndarray) -> None:
        catalog = PatternCatalog(3)
        catalog.build_from_input(cavern_sample)
        rules = catalog.adjacency_rules

        for direction in Direction:
            assert np.array_equal(rules[:, :, direction.value], rules[:, :, direction.reverse().value].T)

    def test_every_pattern_has_neighbors_in_periodic_sample(self, cavern_sample: np.ndarray) -> None:
        catalog = PatternCatalog(3, periodic_input=True)
        catalog.build_from_input(cavern_sample)

        assert catalog.adjacency_rules.any(axis=1).all()

    def test_pattern_size_one_allows_everything(self) -> None:
        catalog = PatternCatalog(1)
        catalog.build_from_input(np.array([[0, 1], [2, 2]]))

        assert catalog.adjacency_rules.shape == (3, 3, 4)
        assert catalog.adjacency_rules.all()

    def test_rules_grow_with_new_samples(self) -> None:
        catalog = PatternCatalog(2)
        catalog.build_from_input(np.array([[0, 1], [1, 0]]))
        catalog.build_from_input(np.array([[2, 2], [2, 2]]))

        assert catalog.adjacency_rules.shape == (3, 3, 4)

    def test_rules_are_read_only(self, quad_catalog: PatternCatalog) -> None:
        with pytest.raises(ValueError):
            quad_catalog.adjacency_rules[0, 0, 0] = True


# =============================================================================
# Reconstruction
# =============================================================================


class TestReconstruction:
    """Tests for turning pattern grids back into tile grids."""

    def test_output_shape_grows_by_pattern_size(self, quad_catalog: PatternCatalog) -> None:
        pattern_grid = np.zeros((3, 4), dtype=int)
        tilemap = quad_catalog.reconstruct_from_pattern_grid(4, 3, pattern_grid)

        assert tilemap.shape == (4, 5)

    def test_consistent_grid_reproduces_periodic_sample(self, quad_catalog: PatternCatalog) -> None:
        p0 = find_pattern(quad_catalog, [[0, 1], [2, 3]])
        p1 = find_pattern(quad_catalog, [[1, 0], [3, 2]])
        p2 = find_pattern(quad_catalog, [[2, 3], [0, 1]])
        p3 = find_pattern(quad_catalog, [[3, 2], [1, 0]])
        pattern_grid = np.array([[p0, p1, p0], [p2, p3, p2]])

        tilemap = quad_catalog.reconstruct_from_pattern_grid(3, 2, pattern_grid)

        assert tilemap.tolist() == [[0, 1, 0, 1], [2, 3, 2, 3], [0, 1, 0, 1]]

    def test_single_cell_returns_pattern(self, quad_catalog: PatternCatalog) -> None:
        tilemap = quad_catalog.reconstruct_from_pattern_grid(1, 1, np.array([[2]]))

        assert np.array_equal(tilemap, quad_catalog.get_pattern(2))

    def test_shape_mismatch_raises(self, quad_catalog: PatternCatalog) -> None:
        with pytest.raises(ValueError):
            quad_catalog.reconstruct_from_pattern_grid(3, 2, np.zeros((3, 2), dtype=int))

    def test_non_positive_size_raises(self, quad_catalog: PatternCatalog) -> None:
        with pytest.raises(ValueError):
            quad_catalog.reconstruct_from_pattern_grid(0, 2, np.zeros((2, 0), dtype=int))

    def test_unknown_pattern_index_raises(self, quad_catalog: PatternCatalog) -> None:
        with pytest.raises(PatternCatalogError):
            quad_catalog.reconstruct_from_pattern_grid(2, 1, np.array([[0, 4]]))
