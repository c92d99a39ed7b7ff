"""Currency line edit that regroups digits as the user types."""

from PyQt6.QtWidgets import QLineEdit
from PyQt6.QtCore import Qt, pyqtSignal

from retireplan.core.formatting import format_number, parse_signed_digits, reformat_signed_with_caret


class CurrencyLineEdit(QLineEdit):
    """Whole-currency input showing grouped digits (e.g. 3,000,000).

    Only digits and a leading minus sign are kept from what is typed; the
    caret stays after the same digit when separators are inserted or
    removed. Negative amounts (debt, net withdrawals) round-trip.
    """

    valueChanged = pyqtSignal(float)

    def __init__(self, value: float = 0, locale: str | None = None, parent=None):
        super().__init__(parent)
        self._locale = locale
        self._updating = False
        self.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        self.setText(self._text_for(value))
        self.textEdited.connect(self._on_text_edited)

    def _text_for(self, value: float) -> str:
        sign = "-" if round(value) < 0 else ""
        return sign + format_number(abs(value), 0, self._locale)

    def value(self) -> float:
        return float(parse_signed_digits(self.text()))

    def setValue(self, value: float):
        self._updating = True
        self.setText(self._text_for(value))
        self._updating = False
        self.valueChanged.emit(self.value())

    def set_locale(self, locale: str | None):
        self._locale = locale
        self.setValue(self.value())

    def _on_text_edited(self, text: str):
        if self._updating:
            return
        new_text, caret = reformat_signed_with_caret(text, self.cursorPosition(), self._locale)
        self._updating = True
        self.setText(new_text)
        self.setCursorPosition(caret)
        self._updating = False
        self.valueChanged.emit(self.value())
