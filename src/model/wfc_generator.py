"""Contains the generation pipeline that turns sample arrays into a generated tilemap."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

import constants
from model.pattern_catalog import PatternCatalog, PatternCatalogError
from model.wave_model import WaveModel

if TYPE_CHECKING:
    from collections.abc import Iterable

    import numpy as np
    from numpy.typing import ArrayLike, NDArray


logger = logging.getLogger(__name__)


@dataclass
class GenerationSettings:
    """The configuration of a single tilemap generation.

    Attributes:
        pattern_size: The width and height of the square patterns extracted from the samples (in tiles).
        periodic_input: If True, patterns are also extracted across the borders of the samples.
        output_width: The width of the output pattern grid (in cells). The tilemap is pattern_size - 1 tiles wider.
        output_height: The height of the output pattern grid (in cells). The tilemap is pattern_size - 1 tiles higher.
        seed: Seed for the wave model. None or a negative value results in a non-reproducible run.
    """

    pattern_size: int = constants.PATTERN_SIZE_DEFAULT
    periodic_input: bool = constants.PERIODIC_INPUT_DEFAULT
    output_width: int = constants.OUTPUT_SIZE_DEFAULT
    output_height: int = constants.OUTPUT_SIZE_DEFAULT
    seed: int | None = None

    @property
    def resolved_seed(self) -> int | None:
        """The seed handed to the wave model (None if the run should not be reproducible)."""
        if self.seed is None or self.seed < 0:
            return None
        return self.seed


@dataclass(frozen=True)
class GenerationResult:
    """The outcome of a successful tilemap generation.

    Attributes:
        tilemap: The generated 2D array of tile IDs of shape (output_height + N - 1, output_width + N - 1).
        pattern_grid: The solved 2D array of pattern indices of shape (output_height, output_width).
        catalog: The pattern catalog built from the samples.
        seed: The seed the wave model was run with (None for a non-reproducible run).
    """

    tilemap: NDArray[np.int_]
    pattern_grid: NDArray[np.int_]
    catalog: PatternCatalog
    seed: int | None


def build_catalog(sample_arrays: Iterable[ArrayLike], pattern_size: int, periodic_input: bool) -> PatternCatalog:
    """Builds one pattern catalog from all given sample arrays.

    Args:
        sample_arrays: The 2D sample arrays of tile IDs to extract patterns from.
        pattern_size: The width and height of the square patterns to extract (in tiles).
        periodic_input: If True, patterns are also extracted across the borders of the samples.

    Returns:
        The catalog containing the merged patterns, weights and adjacency rules of all samples.

    Raises:
        PatternCatalogError: If no samples were given or a sample cannot be used for pattern extraction.
    """
    catalog = PatternCatalog(pattern_size, periodic_input)
    for sample_array in sample_arrays:
        catalog.build_from_input(sample_array)

    if catalog.sample_count == 0:
        raise PatternCatalogError("At least one sample array is needed to build a pattern catalog.")

    return catalog


def generate_tilemap(sample_arrays: Iterable[ArrayLike], settings: GenerationSettings) -> GenerationResult:
    """Runs the full pipeline: build the catalog, solve the wave and reconstruct the tilemap.

    The pipeline makes a single attempt. A contradiction is passed on to the caller, who may retry with another seed.

    Args:
        sample_arrays: The 2D sample arrays of tile IDs to learn the patterns from.
        settings: The configuration of this generation.

    Returns:
        The generated tilemap together with the solved pattern grid, the catalog and the seed used.

    Raises:
        PatternCatalogError: If the catalog cannot be built from the samples.
        WFCContradiction: If the wave model runs into a contradiction.
    """
    catalog = build_catalog(sample_arrays, settings.pattern_size, settings.periodic_input)

    seed = settings.resolved_seed
    model = WaveModel(catalog, settings.output_width, settings.output_height, seed)
    pattern_grid = model.run()

    tilemap = catalog.reconstruct_from_pattern_grid(model.output_width, model.output_height, pattern_grid)

    logger.info(
        "Generated %dx%d tilemap from %d patterns (seed %s)",
        tilemap.shape[1],
        tilemap.shape[0],
        catalog.pattern_count,
        seed,
    )

    return GenerationResult(tilemap, pattern_grid, catalog, seed)
