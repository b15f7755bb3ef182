"""Contains the widget class for the sample and generation settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PIL.ImageQt import ImageQt
from PyQt6 import QtCore as qtc
from PyQt6 import QtGui as qtg
from PyQt6 import QtWidgets as qtw

import constants
from model import map_io
from view.int_spin_box import IntSpinBox

if TYPE_CHECKING:
    from model.tileset_manager import TilesetManager
    from model.wfc_manager import WFCManager


logger = logging.getLogger(__name__)


class SettingsWidget(qtw.QWidget):
    """The widget class for the sample and generation settings.

    This widget loads the sample tilemaps (single CSV files or whole folders), holds the pattern and output settings of
    the WFC manager and the rendering settings of the tileset manager. The right side previews the most recently loaded
    sample with the current tileset or palette.
    """

    # The WFC manager holding the samples and the generation settings.
    _wfc_manager: WFCManager
    # The tileset manager responsible for rendering tilemaps.
    _tileset_manager: TilesetManager

    # Lists the files the loaded samples come from.
    _sample_list: qtw.QListWidget
    # Button to load a single sample CSV file.
    _add_sample_file_button: qtw.QPushButton
    # Button to load every CSV file of a folder.
    _add_sample_folder_button: qtw.QPushButton
    # Button to remove all loaded samples.
    _clear_samples_button: qtw.QPushButton

    # Input for the width and height of the extracted patterns (in tiles).
    _pattern_size_input: IntSpinBox
    # Checkbox to toggle pattern extraction across the sample borders.
    _periodic_input_checkbox: qtw.QCheckBox
    # Input for the width of the output pattern grid (in cells).
    _output_width_input: IntSpinBox
    # Input for the height of the output pattern grid (in cells).
    _output_height_input: IntSpinBox
    # Input for the random seed (-1 for a random run).
    _seed_input: IntSpinBox

    # Input for the width and height of a rendered tile (in pixels).
    _tile_size_input: IntSpinBox
    # Button to trigger the file dialog for loading a tileset image.
    _load_tileset_file_button: qtw.QPushButton

    # Label used to display the preview of the last loaded sample.
    _sample_preview_label: qtw.QLabel

    def __init__(self, wfc_manager: WFCManager, tileset_manager: TilesetManager) -> None:
        """Initializes the widget and sets up the GUI elements and connections.

        Args:
            wfc_manager: The WFC manager holding the samples and the generation settings.
            tileset_manager: The tileset manager responsible for rendering tilemaps.
        """
        super().__init__()

        self._wfc_manager = wfc_manager
        self._tileset_manager = tileset_manager

        # === LEFT SIDE - WIDGETS ===

        self._sample_list = qtw.QListWidget()

        self._add_sample_file_button = qtw.QPushButton("Add Sample (from CSV File)")
        self._add_sample_file_button.clicked.connect(self.add_sample_file)
        self._add_sample_folder_button = qtw.QPushButton("Add Samples (from Folder)")
        self._add_sample_folder_button.clicked.connect(self.add_sample_folder)
        self._clear_samples_button = qtw.QPushButton("Clear Samples")
        self._clear_samples_button.clicked.connect(self.clear_samples)

        self._pattern_size_input = IntSpinBox(
            constants.PATTERN_SIZE_DEFAULT, constants.PATTERN_SIZE_MIN_LIMIT, constants.PATTERN_SIZE_MAX_LIMIT
        )
        self._pattern_size_input.value_change_commited.connect(self.on_generation_settings_changed)

        self._periodic_input_checkbox = qtw.QCheckBox()
        self._periodic_input_checkbox.setChecked(constants.PERIODIC_INPUT_DEFAULT)
        self._periodic_input_checkbox.toggled.connect(self.on_generation_settings_changed)

        self._output_width_input = IntSpinBox(
            constants.OUTPUT_SIZE_DEFAULT, constants.OUTPUT_SIZE_MIN_LIMIT, constants.OUTPUT_SIZE_MAX_LIMIT, 5
        )
        self._output_width_input.value_change_commited.connect(self.on_generation_settings_changed)
        self._output_height_input = IntSpinBox(
            constants.OUTPUT_SIZE_DEFAULT, constants.OUTPUT_SIZE_MIN_LIMIT, constants.OUTPUT_SIZE_MAX_LIMIT, 5
        )
        self._output_height_input.value_change_commited.connect(self.on_generation_settings_changed)

        self._seed_input = IntSpinBox(constants.RANDOM_SEED_DEFAULT, -1, constants.RANDOM_SEED_MAX, 1, "Random")
        self._seed_input.value_change_commited.connect(self.on_generation_settings_changed)

        self._tile_size_input = IntSpinBox(
            self._tileset_manager.tile_size[0], constants.TILE_SIZE_MIN_LIMIT, constants.TILE_SIZE_MAX_LIMIT
        )
        self._tile_size_input.value_change_commited.connect(self.on_tile_size_input_changed)

        self._load_tileset_file_button = qtw.QPushButton("Load Tileset (from JPEG/PNG File)")
        self._load_tileset_file_button.clicked.connect(self.load_tileset_file)

        # === LEFT SIDE - LAYOUT ===

        container_samples = qtw.QGroupBox("Samples")
        container_samples_layout = qtw.QVBoxLayout()
        container_samples.setLayout(container_samples_layout)
        container_samples_layout.addWidget(self._sample_list)
        container_samples_layout.addWidget(self._add_sample_file_button)
        container_samples_layout.addWidget(self._add_sample_folder_button)
        container_samples_layout.addWidget(self._clear_samples_button)

        container_wfc_settings = qtw.QGroupBox("WFC Settings")
        container_wfc_settings_layout = qtw.QGridLayout()
        container_wfc_settings.setLayout(container_wfc_settings_layout)
        container_wfc_settings_layout.setColumnStretch(0, 1)
        container_wfc_settings_layout.setColumnMinimumWidth(1, constants.LAYOUT_GRID_MIDDLE_COLUMN_MIN_WIDTH)
        container_wfc_settings_layout.setColumnMinimumWidth(2, constants.LAYOUT_GRID_RIGHT_COLUMN_MIN_WIDTH)
        container_wfc_settings_layout.addWidget(qtw.QLabel("Pattern Size"), 0, 0)
        container_wfc_settings_layout.addWidget(self._pattern_size_input, 0, 2)
        container_wfc_settings_layout.addWidget(qtw.QLabel("Wrap Around Sample Borders?"), 1, 0)
        container_wfc_settings_layout.addWidget(self._periodic_input_checkbox, 1, 2)
        container_wfc_settings_layout.addWidget(qtw.QLabel("Output Width (in Cells)"), 2, 0)
        container_wfc_settings_layout.addWidget(self._output_width_input, 2, 2)
        container_wfc_settings_layout.addWidget(qtw.QLabel("Output Height (in Cells)"), 3, 0)
        container_wfc_settings_layout.addWidget(self._output_height_input, 3, 2)
        container_wfc_settings_layout.addWidget(qtw.QLabel("Seed"), 4, 0)
        container_wfc_settings_layout.addWidget(self._seed_input, 4, 2)

        container_tileset_settings = qtw.QGroupBox("Tileset Settings")
        container_tileset_settings_layout = qtw.QGridLayout()
        container_tileset_settings.setLayout(container_tileset_settings_layout)
        container_tileset_settings_layout.setColumnStretch(0, 1)
        container_tileset_settings_layout.setColumnMinimumWidth(1, constants.LAYOUT_GRID_MIDDLE_COLUMN_MIN_WIDTH)
        container_tileset_settings_layout.setColumnMinimumWidth(2, constants.LAYOUT_GRID_RIGHT_COLUMN_MIN_WIDTH)
        container_tileset_settings_layout.addWidget(qtw.QLabel("Tile Size (in Pixels)"), 0, 0)
        container_tileset_settings_layout.addWidget(self._tile_size_input, 0, 2)
        container_tileset_settings_layout.addWidget(self._load_tileset_file_button, 1, 0, 1, -1)

        container_left = qtw.QWidget()
        container_left.setMaximumWidth(constants.LAYOUT_LEFT_SIDE_MAX_WIDTH)
        container_left_layout = qtw.QVBoxLayout()
        container_left.setLayout(container_left_layout)
        container_left_layout.setSpacing(constants.LAYOUT_LEFT_SIDE_VBOX_SPACING)
        container_left_layout.addWidget(container_samples)
        container_left_layout.addWidget(container_wfc_settings)
        container_left_layout.addWidget(container_tileset_settings)
        container_left_layout.addStretch()

        # === RIGHT SIDE ===

        self._sample_preview_label = qtw.QLabel()
        self._sample_preview_label.setAlignment(qtc.Qt.AlignmentFlag.AlignCenter)

        container_right = qtw.QWidget()
        container_right_layout = qtw.QVBoxLayout()
        container_right.setLayout(container_right_layout)
        container_right_layout.addWidget(self._sample_preview_label)

        # === COMBINE SIDES ===

        layout = qtw.QHBoxLayout()
        self.setLayout(layout)
        layout.addWidget(container_left)
        layout.addWidget(container_right)

        self.on_generation_settings_changed()

    def load_example_samples(self) -> None:
        """Loads the samples shipped with the application, if they can be found."""
        try:
            sample_arrays = map_io.load_all_samples(constants.EXAMPLE_SAMPLES_FOLDER)
        except map_io.MapFormatError as exc:
            logger.warning("No example samples loaded: %s", exc)
            return

        self._add_samples(sample_arrays, constants.EXAMPLE_SAMPLES_FOLDER)

    def add_sample_file(self) -> None:
        """Opens a file dialog for the user to select a sample CSV file and loads it."""
        file_path, _ = qtw.QFileDialog.getOpenFileName(self, "Load Sample from...", "", "CSV Files (*.csv)")
        if not file_path:
            return

        try:
            sample_array = map_io.load_sample_csv(file_path)
        except map_io.MapFormatError as exc:
            qtw.QMessageBox.warning(self, "Invalid Sample", str(exc))
            return

        self._add_samples([sample_array], Path(file_path).name)

    def add_sample_folder(self) -> None:
        """Opens a folder dialog and loads every sample CSV file located in the selected folder."""
        folder_path = qtw.QFileDialog.getExistingDirectory(self, "Load Samples from...")
        if not folder_path:
            return

        try:
            sample_arrays = map_io.load_all_samples(folder_path)
        except map_io.MapFormatError as exc:
            qtw.QMessageBox.warning(self, "Invalid Sample Folder", str(exc))
            return

        self._add_samples(sample_arrays, folder_path)

    def clear_samples(self) -> None:
        """Removes all loaded samples."""
        self._wfc_manager.clear_samples()
        self._sample_list.clear()
        self._sample_preview_label.clear()

    def load_tileset_file(self) -> None:
        """Opens a file dialog for the user to select a tileset image and loads it."""
        file_path, _ = qtw.QFileDialog.getOpenFileName(
            self, "Load Tileset from...", "", "JPEG/PNG Files (*.jpeg *.jpg *.png)"
        )
        if not file_path:
            return

        tile_size = self._tile_size_input.value()
        try:
            self._tileset_manager.set_tileset(file_path, (tile_size, tile_size))
        except OSError as exc:
            qtw.QMessageBox.warning(self, "Invalid Tileset", str(exc))
            return

        self._draw_sample_preview()

    def on_tile_size_input_changed(self, tile_size: int) -> None:
        """Updates the tile size of the tileset manager and redraws the preview."""
        self._tileset_manager.set_tile_size((tile_size, tile_size))
        self._draw_sample_preview()

    def on_generation_settings_changed(self) -> None:
        """Writes the values of the input fields to the settings of the WFC manager."""
        settings = self._wfc_manager.settings
        settings.pattern_size = self._pattern_size_input.value()
        settings.periodic_input = self._periodic_input_checkbox.isChecked()
        settings.output_width = self._output_width_input.value()
        settings.output_height = self._output_height_input.value()
        settings.seed = self._seed_input.value()

    def _add_samples(self, sample_arrays: list, source: str) -> None:
        if not sample_arrays:
            return

        self._wfc_manager.add_samples(sample_arrays)
        for sample_array in sample_arrays:
            self._sample_list.addItem(f"{source} ({sample_array.shape[1]}x{sample_array.shape[0]})")
        self._draw_sample_preview()

    def _draw_sample_preview(self) -> None:
        """Renders the most recently loaded sample and displays it."""
        sample_arrays = self._wfc_manager.sample_arrays
        if not sample_arrays:
            return

        sample_img = self._tileset_manager.get_tilemap_img(sample_arrays[-1])
        self._sample_preview_label.setPixmap(qtg.QPixmap.fromImage(ImageQt(sample_img).copy()))
