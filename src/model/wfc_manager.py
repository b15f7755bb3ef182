"""Contains the class that holds the loaded samples and runs generations for the GUI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from PyQt6 import QtCore as qtc

from model import wfc_generator
from model.pattern_catalog import PatternCatalogError
from model.wave_model import WFCContradiction

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from model.tileset_manager import TilesetManager


logger = logging.getLogger(__name__)


class WFCManager(qtc.QObject):
    """Manages the sample arrays and settings of the GUI and runs the generation pipeline on request.

    Generation runs synchronously on the calling thread; a single attempt is made per request. The result (or the
    reason of the failure) is reported back to the view via signals.

    Signals:
        samples_changed: Emitted with the new number of loaded samples after samples were added or cleared.
        finished: Emitted with the generated tilemap and its rendered image after a successful generation.
        failed: Emitted with an error message if the catalog could not be built or the wave model hit a contradiction.

    Attributes:
        settings: The configuration used for the next generation.
    """

    samples_changed = qtc.pyqtSignal(int)
    finished = qtc.pyqtSignal(np.ndarray, object)
    failed = qtc.pyqtSignal(str)

    settings: wfc_generator.GenerationSettings

    # The tileset manager responsible for rendering generated tilemaps.
    _tileset_manager: TilesetManager
    # The sample arrays the pattern catalog is built from.
    _sample_arrays: list[NDArray[np.int_]]

    def __init__(self, tileset_manager: TilesetManager) -> None:
        """Initializes the manager without samples and with the default settings.

        Args:
            tileset_manager: The tileset manager responsible for rendering generated tilemaps.
        """
        super().__init__()

        self.settings = wfc_generator.GenerationSettings()

        self._tileset_manager = tileset_manager
        self._sample_arrays = []

    @property
    def sample_arrays(self) -> list[NDArray[np.int_]]:
        """The currently loaded sample arrays."""
        return list(self._sample_arrays)

    def add_samples(self, sample_arrays: list[NDArray[np.int_]]) -> None:
        """Adds sample arrays to the ones the next catalog is built from."""
        self._sample_arrays.extend(sample_arrays)
        self.samples_changed.emit(len(self._sample_arrays))

    def clear_samples(self) -> None:
        """Removes all loaded sample arrays."""
        self._sample_arrays = []
        self.samples_changed.emit(0)

    def generate_tilemap(self) -> None:
        """Runs one generation with the current samples and settings and reports the outcome via signals."""
        try:
            result = wfc_generator.generate_tilemap(self._sample_arrays, self.settings)
        except (PatternCatalogError, WFCContradiction) as exc:
            logger.warning("Tilemap generation failed: %s", exc)
            self.failed.emit(str(exc))
            return

        tilemap_img = self._tileset_manager.get_tilemap_img(result.tilemap)
        self.finished.emit(result.tilemap, tilemap_img)
