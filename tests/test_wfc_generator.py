"""Tests for the generation pipeline from sample arrays to tilemaps."""

from __future__ import annotations

import logging

import numpy as np
import pytest

import constants
from model.pattern_catalog import PatternCatalogError
from model.wave_model import WFCContradiction
from model.wfc_generator import GenerationSettings, build_catalog, generate_tilemap


class TestGenerationSettings:
    def test_defaults(self) -> None:
        settings = GenerationSettings()

        assert settings.pattern_size == constants.PATTERN_SIZE_DEFAULT
        assert settings.periodic_input is constants.PERIODIC_INPUT_DEFAULT
        assert settings.output_width == constants.OUTPUT_SIZE_DEFAULT
        assert settings.output_height == constants.OUTPUT_SIZE_DEFAULT
        assert settings.seed is None

    @pytest.mark.parametrize(("seed", "expected"), [(None, None), (-1, None), (0, 0), (12345, 12345)])
    def test_resolved_seed(self, seed: int | None, expected: int | None) -> None:
        assert GenerationSettings(seed=seed).resolved_seed == expected


class TestBuildCatalog:
    def test_merges_all_samples(self) -> None:
        catalog = build_catalog([np.array([[0, 1]]), np.array([[2]])], 1, True)

        assert catalog.sample_count == 2
        assert catalog.pattern_count == 3

    def test_no_samples_raises(self) -> None:
        with pytest.raises(PatternCatalogError):
            build_catalog([], 2, True)

    def test_invalid_sample_raises(self) -> None:
        with pytest.raises(PatternCatalogError):
            build_catalog([np.zeros((1, 1), dtype=int)], 3, False)


class TestGenerateTilemap:
    def test_result_shapes(self) -> None:
        settings = GenerationSettings(pattern_size=2, output_width=5, output_height=4, seed=8)
        result = generate_tilemap([np.array([[0, 1], [2, 3]])], settings)

        assert result.pattern_grid.shape == (4, 5)
        assert result.tilemap.shape == (5, 6)
        assert result.seed == 8
        assert result.catalog.pattern_count == 4

    def test_tilemap_matches_pattern_grid(self) -> None:
        settings = GenerationSettings(pattern_size=2, output_width=3, output_height=3, seed=1)
        result = generate_tilemap([np.array([[0, 1], [2, 3]])], settings)

        expected = result.catalog.reconstruct_from_pattern_grid(3, 3, result.pattern_grid)
        assert np.array_equal(result.tilemap, expected)

    def test_same_seed_same_tilemap(self, cavern_sample: np.ndarray) -> None:
        settings = GenerationSettings(pattern_size=1, output_width=8, output_height=8, seed=5)

        first = generate_tilemap([cavern_sample], settings)
        second = generate_tilemap([cavern_sample], settings)

        assert np.array_equal(first.tilemap, second.tilemap)

    def test_negative_seed_is_random(self, cavern_sample: np.ndarray) -> None:
        settings = GenerationSettings(pattern_size=1, output_width=4, output_height=4, seed=-1)

        assert generate_tilemap([cavern_sample], settings).seed is None

    def test_tiles_come_from_samples(self, cavern_sample: np.ndarray) -> None:
        settings = GenerationSettings(pattern_size=1, output_width=10, output_height=6, seed=3)
        result = generate_tilemap([cavern_sample], settings)

        assert set(np.unique(result.tilemap).tolist()) <= set(np.unique(cavern_sample).tolist())

    def test_contradiction_is_passed_on(self) -> None:
        settings = GenerationSettings(pattern_size=2, periodic_input=False, output_width=3, output_height=1, seed=0)

        with pytest.raises(WFCContradiction):
            generate_tilemap([np.array([[0, 1, 2], [0, 1, 2]])], settings)

    def test_success_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        settings = GenerationSettings(pattern_size=1, output_width=2, output_height=2, seed=0)

        with caplog.at_level(logging.INFO, logger="model.wfc_generator"):
            generate_tilemap([np.array([[0, 1]])], settings)

        assert "Generated 2x2 tilemap" in caplog.text
