"""Inhale / exhale prompt driven by a ``BreathingRhythm``."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QLabel

from ..timer.breathing import BreathingRhythm, BreathingPhase
from .styles import PALETTE


BREATH_LABELS: dict[BreathingPhase, str] = {
    BreathingPhase.INHALE: "Breathe in…",
    BreathingPhase.EXHALE: "Breathe out…",
}


class BreathingGuide(QWidget):
    """Shows the current breathing prompt; hidden while the rhythm is idle."""

    def __init__(self, rhythm: BreathingRhythm, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._rhythm = rhythm

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 4, 0, 4)
        self._label = QLabel("", self)
        self._label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._label.setStyleSheet(
            f"font-size: 16px; font-weight: 600; color: {PALETTE['success']};"
        )
        layout.addWidget(self._label)

        rhythm.phase_changed.connect(self._refresh)
        rhythm.active_changed.connect(self._refresh)
        self._refresh()

    @property
    def text(self) -> str:
        return self._label.text()

    def _refresh(self, *_args) -> None:
        phase = self._rhythm.display_phase
        if phase is None:
            self._label.setText("")
            self.setVisible(False)
            return
        self._label.setText(BREATH_LABELS[phase])
        self.setVisible(True)
