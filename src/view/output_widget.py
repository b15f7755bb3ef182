"""Contains the widget class for generating/displaying the output tilemap."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from PIL.ImageQt import ImageQt
from PyQt6 import QtCore as qtc
from PyQt6 import QtGui as qtg
from PyQt6 import QtWidgets as qtw

import constants
from model import map_io
from model.map_labeler import count_hazards, get_difficulty

if TYPE_CHECKING:
    from numpy.typing import NDArray
    from PIL import Image

    from model.tileset_manager import TilesetManager
    from model.wfc_manager import WFCManager


class OutputWidget(qtw.QWidget):
    """The widget class for generating/displaying the output tilemap.

    This widget starts the generation via the WFC manager and displays the resulting tilemap together with its
    difficulty label. It also provides options for saving the tilemap data (.csv format, optionally with the difficulty
    label as first line) and its visual representation (.png format). A failed generation is reported in a message box.
    """

    # The WFC manager responsible for running the generation.
    _wfc_manager: WFCManager
    # The tileset manager responsible for rendering and saving tilemap images.
    _tileset_manager: TilesetManager

    # Button to start generating the output tilemap via WFC.
    _generate_tilemap_button: qtw.QPushButton
    # Label showing the outcome of the last generation.
    _status_label: qtw.QLabel

    # Button to save the raw tilemap data (.csv format).
    _save_tilemap_button: qtw.QPushButton
    # Button to save the tilemap data preceded by its difficulty label (.csv format).
    _save_labeled_tilemap_button: qtw.QPushButton
    # Button to save the tilemap image (.png format).
    _save_tilemap_image_button: qtw.QPushButton

    # Label to display the tilemap image.
    _tilemap_img_label: qtw.QLabel

    # The last generated tilemap (None before the first successful generation).
    tilemap: NDArray[np.int_] | None
    # The rendered image of the last generated tilemap.
    tilemap_img: Image.Image | None

    def __init__(self, wfc_manager: WFCManager, tileset_manager: TilesetManager) -> None:
        """Initializes the widget and sets up the GUI elements and connections.

        Args:
            wfc_manager: The WFC manager responsible for running the generation.
            tileset_manager: The tileset manager responsible for rendering and saving tilemap images.
        """
        super().__init__()

        self._wfc_manager = wfc_manager
        self._tileset_manager = tileset_manager

        self.tilemap = None
        self.tilemap_img = None

        # === LEFT SIDE - WIDGETS ===

        self._generate_tilemap_button = qtw.QPushButton("Generate Tilemap")
        self._generate_tilemap_button.clicked.connect(self.on_generate_tilemap_button_clicked)
        self._generate_tilemap_button.setEnabled(bool(self._wfc_manager.sample_arrays))

        self._status_label = qtw.QLabel("Load at least one sample to generate a tilemap.")
        self._status_label.setWordWrap(True)

        self._save_tilemap_button = qtw.QPushButton("Save Tilemap (to CSV File)")
        self._save_tilemap_button.clicked.connect(self.save_tilemap)

        self._save_labeled_tilemap_button = qtw.QPushButton("Save Labeled Tilemap (to CSV File)")
        self._save_labeled_tilemap_button.clicked.connect(self.save_labeled_tilemap)

        self._save_tilemap_image_button = qtw.QPushButton("Save Tilemap Image")
        self._save_tilemap_image_button.clicked.connect(self.save_tilemap_image)

        self._set_save_buttons_enabled(False)

        # === LEFT SIDE - LAYOUT ===

        container_tilemap_generation = qtw.QGroupBox("Tilemap Generation")
        container_tilemap_generation_layout = qtw.QVBoxLayout()
        container_tilemap_generation.setLayout(container_tilemap_generation_layout)
        container_tilemap_generation_layout.addWidget(self._generate_tilemap_button)
        container_tilemap_generation_layout.addWidget(self._status_label)

        container_tilemap_storage = qtw.QGroupBox("Tilemap Storage")
        container_tilemap_storage_layout = qtw.QGridLayout()
        container_tilemap_storage.setLayout(container_tilemap_storage_layout)
        container_tilemap_storage_layout.addWidget(self._save_tilemap_button, 0, 0, 1, -1)
        container_tilemap_storage_layout.addWidget(self._save_labeled_tilemap_button, 1, 0, 1, -1)
        container_tilemap_storage_layout.addWidget(self._save_tilemap_image_button, 2, 0, 1, -1)

        container_left = qtw.QWidget()
        container_left.setMaximumWidth(constants.LAYOUT_LEFT_SIDE_MAX_WIDTH)
        container_left_layout = qtw.QVBoxLayout()
        container_left.setLayout(container_left_layout)
        container_left_layout.setSpacing(constants.LAYOUT_LEFT_SIDE_VBOX_SPACING)
        container_left_layout.addWidget(container_tilemap_generation)
        container_left_layout.addWidget(container_tilemap_storage)
        container_left_layout.addStretch()

        # === RIGHT SIDE ===

        self._tilemap_img_label = qtw.QLabel()
        self._tilemap_img_label.setAlignment(qtc.Qt.AlignmentFlag.AlignCenter)

        container_right = qtw.QWidget()
        container_right_layout = qtw.QVBoxLayout()
        container_right.setLayout(container_right_layout)
        container_right_layout.addWidget(self._tilemap_img_label)

        # === COMBINE SIDES ===

        layout = qtw.QHBoxLayout()
        self.setLayout(layout)
        layout.addWidget(container_left)
        layout.addWidget(container_right)

        self._wfc_manager.samples_changed.connect(self.on_wfc_manager_samples_changed)
        self._wfc_manager.finished.connect(self.on_wfc_manager_finished)
        self._wfc_manager.failed.connect(self.on_wfc_manager_failed)

    def on_generate_tilemap_button_clicked(self) -> None:
        """Orders the WFC manager to generate a tilemap with the current samples and settings."""
        self._generate_tilemap_button.setEnabled(False)
        self._status_label.setText("Generating...")
        qtw.QApplication.setOverrideCursor(qtc.Qt.CursorShape.WaitCursor)
        try:
            self._wfc_manager.generate_tilemap()
        finally:
            qtw.QApplication.restoreOverrideCursor()
            self._generate_tilemap_button.setEnabled(True)

    def on_wfc_manager_samples_changed(self, sample_count: int) -> None:
        """Enables the 'Generate' button only while samples are loaded."""
        self._generate_tilemap_button.setEnabled(sample_count > 0)
        if sample_count > 0:
            self._status_label.setText(f"{sample_count} sample(s) loaded.")
        else:
            self._status_label.setText("Load at least one sample to generate a tilemap.")

    def on_wfc_manager_finished(self, tilemap: NDArray[np.int_], tilemap_img: Image.Image) -> None:
        """Receives the generated tilemap data and image and draws the latter.

        Args:
            tilemap: The generated 2D array of tile IDs.
            tilemap_img: The rendered tilemap image.
        """
        self.tilemap = tilemap
        self.tilemap_img = tilemap_img
        self._draw_tilemap_img(tilemap_img)
        self._set_save_buttons_enabled(True)

        self._status_label.setText(
            f"Generated a {tilemap.shape[1]}x{tilemap.shape[0]} tilemap with {count_hazards(tilemap)} water tiles "
            f"(difficulty: {get_difficulty(tilemap).name.capitalize()})."
        )

    def on_wfc_manager_failed(self, message: str) -> None:
        """Reports a failed generation to the user."""
        self._status_label.setText("Generation failed.")
        qtw.QMessageBox.warning(self, "Generation Failed", f"{message}\n\nTry another seed or other settings.")

    def save_tilemap(self) -> None:
        """Opens a file dialog and saves the tilemap data as a .csv file."""
        if self.tilemap is None:
            return
        file_path, _ = qtw.QFileDialog.getSaveFileName(self, "Save Tilemap to...", "tilemap", "CSV Files (*.csv)")
        if file_path:
            map_io.save_tilemap_csv(self.tilemap, file_path)

    def save_labeled_tilemap(self) -> None:
        """Opens a file dialog and saves the tilemap data with its difficulty label as a .csv file."""
        if self.tilemap is None:
            return
        file_path, _ = qtw.QFileDialog.getSaveFileName(
            self, "Save Labeled Tilemap to...", "tilemap_labeled", "CSV Files (*.csv)"
        )
        if file_path:
            map_io.save_labeled_csv(self.tilemap, file_path)

    def save_tilemap_image(self) -> None:
        """Opens a file dialog and saves the tilemap image as a .png file."""
        if self.tilemap_img is None:
            return
        file_path, _ = qtw.QFileDialog.getSaveFileName(self, "Save Tilemap Image to...", "tilemap", "PNG Files (*.png)")
        if file_path:
            self._tileset_manager.save_tilemap_img(self.tilemap_img, file_path)

    def _set_save_buttons_enabled(self, enabled: bool) -> None:
        self._save_tilemap_button.setEnabled(enabled)
        self._save_labeled_tilemap_button.setEnabled(enabled)
        self._save_tilemap_image_button.setEnabled(enabled)

    def _draw_tilemap_img(self, tilemap_img: Image.Image) -> None:
        """Converts the PIL Image to a QPixmap and displays it in the label."""
        tilemap_img_pixmap = qtg.QPixmap.fromImage(ImageQt(tilemap_img).copy())
        if (
            tilemap_img_pixmap.width() > self._tilemap_img_label.width()
            or tilemap_img_pixmap.height() > self._tilemap_img_label.height()
        ):
            # One pixel less than the label height, otherwise the label grows by one pixel per redraw.
            tilemap_img_pixmap = tilemap_img_pixmap.scaled(
                self._tilemap_img_label.width(),
                self._tilemap_img_label.height() - 1,
                qtc.Qt.AspectRatioMode.KeepAspectRatio,
            )
        self._tilemap_img_label.setPixmap(tilemap_img_pixmap)
