"""Serves as the entry point and initializer for the cavern generator GUI."""

import logging
import sys

from PyQt6 import QtWidgets as qtw

from logging_config import setup_logging
from model.tileset_manager import TilesetManager
from model.wfc_manager import WFCManager
from view.main_window import MainWindow
from view.output_widget import OutputWidget
from view.settings_widget import SettingsWidget

logger = logging.getLogger(__name__)


class MainApp(qtw.QApplication):
    """The application initializer and integrator for the cavern generator.

    Inherits from PyQt's QApplication. It creates the model components (tileset manager and WFC manager) and the view
    components, and connects them before the application starts. The example samples are loaded on startup.
    """

    # The top-level window of the application, which holds all widgets.
    _main_window: MainWindow

    def __init__(self, argv: list[str]) -> None:
        """Initializes the PyQt application and all application components.

        Args:
            argv: Command line arguments passed to the application (sys.argv).
        """
        super().__init__(argv)

        tileset_manager = TilesetManager()
        wfc_manager = WFCManager(tileset_manager)

        settings_widget = SettingsWidget(wfc_manager, tileset_manager)
        output_widget = OutputWidget(wfc_manager, tileset_manager)

        settings_widget.load_example_samples()

        self._main_window = MainWindow(settings_widget, output_widget)
        self._main_window.show()
        logger.info("Cavern generator started")


if __name__ == "__main__":
    setup_logging(log_dir="logs", console_level=logging.INFO)

    app = MainApp(sys.argv)
    sys.exit(app.exec())
