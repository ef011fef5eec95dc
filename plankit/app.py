"""Main application window for PlankIt."""

from __future__ import annotations

from loguru import logger
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QStatusBar,
)

from .audio.sounds import TimerAudio
from .features import FeatureFlags
from .recorder import InMemorySessionRecorder, SessionRecorder
from .settings import Settings, load_settings, save_settings
from .timer.engine import TimerPhase, format_time
from .ui.settings_dialog import SettingsDialog
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget


DEFAULT_EXERCISE_ID = "forearm_plank"
DEFAULT_EXERCISE_NAME = "Forearm Plank"


class PlankItApp(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        recorder: SessionRecorder | None = None,
        exercise_id: str = DEFAULT_EXERCISE_ID,
        exercise_name: str = DEFAULT_EXERCISE_NAME,
    ) -> None:
        super().__init__()
        self.setWindowTitle("PlankIt")

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()
        self.resize(self._settings.window_width, self._settings.window_height)

        # ── collaborators ─────────────────────────────────────────────
        self._features = FeatureFlags.from_settings(self._settings)
        self._recorder = recorder if recorder is not None else InMemorySessionRecorder()
        self._audio = TimerAudio(
            parent=self,
            sound_enabled=self._settings.sound_enabled,
            countdown_sounds_enabled=self._settings.countdown_sounds_enabled,
            volume=self._settings.sound_volume,
        )
        self._audio.sound_enabled_changed.connect(self._remember_sound_preference)

        self.setStyleSheet(build_stylesheet())

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 12)

        self._timer_widget = TimerWidget(
            exercise_id,
            self._settings.default_duration,
            audio=self._audio,
            recorder=self._recorder,
            features=self._features,
            breathing_enabled=self._settings.breathing_guidance,
            exercise_name=exercise_name,
            parent=central,
        )
        self._timer_widget.phase_changed.connect(self._on_phase_changed)
        self._timer_widget.session_finished.connect(self._on_session_finished)
        layout.addWidget(self._timer_widget)
        layout.addStretch()

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready when you are!")

        self._build_menu_bar()

    # ══════════════════════════════════════════════════════════════════
    #  MENU
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu = self.menuBar().addMenu("PlankIt")

        settings_action = QAction("Settings…", self)
        settings_action.setShortcut(QKeySequence("Ctrl+,"))
        settings_action.triggered.connect(self._open_settings)
        menu.addAction(settings_action)

        sound_action = QAction("Toggle Sound", self)
        sound_action.setShortcut(QKeySequence("Ctrl+M"))
        sound_action.triggered.connect(self._audio.toggle_sound)
        menu.addAction(sound_action)

        menu.addSeparator()
        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self.close)
        menu.addAction(quit_action)

    # ══════════════════════════════════════════════════════════════════
    #  SLOTS
    # ══════════════════════════════════════════════════════════════════

    def _on_phase_changed(self, phase: TimerPhase) -> None:
        if phase == TimerPhase.RUNNING:
            self._status_bar.showMessage("You can do this!")
        elif phase == TimerPhase.PAUSED:
            self._status_bar.showMessage("Timer paused")

    def _on_session_finished(self, elapsed: int, natural: bool) -> None:
        if natural:
            self._status_bar.showMessage(f"Workout complete: {format_time(elapsed)}")
        else:
            self._status_bar.showMessage("Timer stopped")

    def _remember_sound_preference(self, enabled: bool) -> None:
        self._settings.sound_enabled = enabled
        save_settings(self._settings)

    def _open_settings(self) -> None:
        dlg = SettingsDialog(
            self._settings, self,
            sound_preview_callback=self._audio.play_completion_sound,
        )
        dlg.exec()
        self._apply_settings()

    def _apply_settings(self) -> None:
        s = self._settings
        self._audio.set_sound_enabled(s.sound_enabled)
        self._audio.set_countdown_sounds_enabled(s.countdown_sounds_enabled)
        self._audio.set_volume(s.sound_volume)
        for name, enabled in s.feature_flags.items():
            self._features.set_enabled(name, enabled)
        self._timer_widget.refresh_features()
        self._timer_widget.set_breathing_enabled(s.breathing_guidance)
        if (
            self._timer_widget.engine.phase == TimerPhase.READY
            and self._timer_widget.engine.target_duration != s.default_duration
        ):
            self._timer_widget.set_duration(s.default_duration)
        logger.debug("Settings applied")

    # ══════════════════════════════════════════════════════════════════
    #  KEYBOARD SHORTCUTS
    # ══════════════════════════════════════════════════════════════════

    def _on_space(self) -> None:
        """Start, pause, resume, or go again."""
        self._timer_widget.toggle_start_pause()

    def _on_escape(self) -> None:
        """Stop the timer (no-op when nothing is in progress)."""
        if self._timer_widget.engine.phase in (TimerPhase.RUNNING, TimerPhase.PAUSED):
            self._timer_widget.stop()

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._timer_widget.dispose()
        self._settings.window_width = self.width()
        self._settings.window_height = self.height()
        save_settings(self._settings)
        event.accept()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Handle Space (start/pause) and Escape (stop) globally."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._on_space()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            self._on_escape()
            event.accept()
            return
        super().keyPressEvent(event)
