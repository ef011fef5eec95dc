"""Settings dialog for PlankIt.

Timer, audio and optional-feature preferences.  Every edit is written to
disk right away; the main window re-applies the settings when the dialog
closes.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog, QDialogButtonBox, QFormLayout, QGroupBox, QHBoxLayout,
    QLabel, QSpinBox, QSlider, QCheckBox, QVBoxLayout, QWidget,
)

from ..features import AI_COACHING, TIMER_TIPS
from ..settings import Settings, save_settings

MIN_HOLD_SECONDS = 5
MAX_HOLD_SECONDS = 600


class SettingsDialog(QDialog):
    """Modal preferences dialog."""

    def __init__(
        self,
        settings: Settings,
        parent: QWidget | None = None,
        *,
        sound_preview_callback: Callable[[], object] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(380)
        self.setModal(True)

        self._settings = settings
        self._sound_preview = sound_preview_callback
        self._populating = False

        root = QVBoxLayout(self)
        root.setContentsMargins(20, 18, 20, 18)
        root.setSpacing(14)
        root.addWidget(self._timer_group())
        root.addWidget(self._sound_group())
        root.addWidget(self._extras_group())
        root.addStretch()

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.accept)
        root.addWidget(buttons)

        self._populate()

    # ── groups ────────────────────────────────────────────────────────────

    def _timer_group(self) -> QGroupBox:
        box = QGroupBox("Timer")
        form = QFormLayout(box)

        self._duration_spin = QSpinBox()
        self._duration_spin.setRange(MIN_HOLD_SECONDS, MAX_HOLD_SECONDS)
        self._duration_spin.setSingleStep(5)
        self._duration_spin.setSuffix(" s")
        self._duration_spin.valueChanged.connect(self._on_duration_changed)
        form.addRow("Default hold:", self._duration_spin)

        self._breathing_cb = self._checkbox("Breathing guidance", form)
        return box

    def _sound_group(self) -> QGroupBox:
        box = QGroupBox("Sound")
        form = QFormLayout(box)

        self._sound_cb = self._checkbox("Completion sound", form)
        self._countdown_cb = self._checkbox("Countdown beeps (10, 5, 3, 2, 1)", form)

        self._vol_slider = QSlider(Qt.Orientation.Horizontal)
        self._vol_slider.setRange(0, 100)
        self._vol_slider.valueChanged.connect(self._on_volume_changed)
        self._vol_slider.sliderReleased.connect(self._on_volume_released)
        self._vol_label = QLabel()
        self._vol_label.setMinimumWidth(36)

        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)
        row_layout.addWidget(self._vol_slider)
        row_layout.addWidget(self._vol_label)
        form.addRow("Volume:", row)
        return box

    def _extras_group(self) -> QGroupBox:
        box = QGroupBox("Extras")
        form = QFormLayout(box)
        self._coaching_cb = self._checkbox("AI coaching messages", form)
        self._tips_cb = self._checkbox("Timer tips", form)
        return box

    def _checkbox(self, text: str, form: QFormLayout) -> QCheckBox:
        cb = QCheckBox(text)
        cb.toggled.connect(self._on_toggle_changed)
        form.addRow(cb)
        return cb

    def _populate(self) -> None:
        s = self._settings
        self._populating = True
        try:
            self._duration_spin.setValue(s.default_duration)
            self._breathing_cb.setChecked(s.breathing_guidance)
            self._sound_cb.setChecked(s.sound_enabled)
            self._countdown_cb.setChecked(s.countdown_sounds_enabled)
            self._vol_slider.setValue(s.sound_volume)
            self._vol_label.setText(f"{s.sound_volume}%")
            self._coaching_cb.setChecked(s.feature_flags.get(AI_COACHING, False))
            self._tips_cb.setChecked(s.feature_flags.get(TIMER_TIPS, False))
        finally:
            self._populating = False

    # ── change handlers (save immediately) ───────────────────────────────

    def _on_duration_changed(self, value: int) -> None:
        if self._populating:
            return
        self._settings.default_duration = value
        save_settings(self._settings)

    def _on_toggle_changed(self) -> None:
        if self._populating:
            return
        s = self._settings
        s.breathing_guidance = self._breathing_cb.isChecked()
        s.sound_enabled = self._sound_cb.isChecked()
        s.countdown_sounds_enabled = self._countdown_cb.isChecked()
        s.feature_flags[AI_COACHING] = self._coaching_cb.isChecked()
        s.feature_flags[TIMER_TIPS] = self._tips_cb.isChecked()
        save_settings(s)

    def _on_volume_changed(self, value: int) -> None:
        self._vol_label.setText(f"{value}%")
        if self._populating:
            return
        self._settings.sound_volume = value
        save_settings(self._settings)

    def _on_volume_released(self) -> None:
        """Play the completion tone so the new volume can be heard."""
        if self._sound_preview:
            self._sound_preview()

    @property
    def settings(self) -> Settings:
        return self._settings
