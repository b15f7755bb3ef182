"""Contains the main window widget class for the cavern generator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PyQt6 import QtWidgets as qtw

if TYPE_CHECKING:
    from view.output_widget import OutputWidget
    from view.settings_widget import SettingsWidget


class MainWindow(qtw.QMainWindow):
    """The main window of the application.

    Holds the settings widget and the output widget in two tabs of a central QTabWidget.
    """

    def __init__(self, settings_widget: SettingsWidget, output_widget: OutputWidget) -> None:
        """Initializes the main window and sets up the tabbed interface.

        Args:
            settings_widget: The widget for loading samples and configuring the generation and rendering.
            output_widget: The widget for generating, displaying and saving the output tilemap.
        """
        super().__init__()

        self.resize(1200, 800)
        self.setWindowTitle("Cavern Generator")

        self.main_tabs = qtw.QTabWidget()
        self.main_tabs.addTab(settings_widget, "Settings")
        self.main_tabs.addTab(output_widget, "Output")

        self.setCentralWidget(self.main_tabs)
