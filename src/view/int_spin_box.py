"""Contains a specialized PyQt widget class for integer settings."""

from PyQt6 import QtCore as qtc
from PyQt6 import QtWidgets as qtw


class IntSpinBox(qtw.QSpinBox):
    """A QSpinBox for generation settings that signals only committed value changes.

    Keyboard tracking is disabled, so typed values are only taken over once the user finishes editing, while the arrow
    buttons take effect right away. The 'value_change_commited' signal is emitted only if the value differs from the
    last committed one. Optionally, the lowest value of the range is displayed as a text (e.g. "Random" for a seed of
    -1).

    Signals:
        value_change_commited: Emitted with the new value when a changed value is committed.
    """

    value_change_commited = qtc.pyqtSignal(int)

    # The last committed value.
    _last_value: int

    def __init__(
        self, default_value: int, min_value: int, max_value: int, step_size: int = 1, min_value_text: str = ""
    ) -> None:
        """Initializes the spin box.

        Args:
            default_value: The initial value.
            min_value: The lowest allowed value.
            max_value: The highest allowed value.
            step_size: The amount the arrow buttons change the value by.
            min_value_text: If not empty, this text is displayed instead of the lowest value.
        """
        super().__init__()

        self._last_value = default_value

        self.setRange(min_value, max_value)
        self.setSingleStep(step_size)
        self.setValue(default_value)
        self.setKeyboardTracking(False)
        self.setCorrectionMode(qtw.QAbstractSpinBox.CorrectionMode.CorrectToNearestValue)
        if min_value_text:
            self.setSpecialValueText(min_value_text)

        self.valueChanged.connect(self.on_value_changed)

    def on_value_changed(self, value: int) -> None:
        """Emits 'value_change_commited' if the value differs from the last committed one."""
        if self._last_value != value:
            self._last_value = value
            self.value_change_commited.emit(value)
