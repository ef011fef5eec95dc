"""Workout timer view: composition root for one exercise.

Layout (top → bottom):
    - Exercise title + sound toggle
    - Timer tip (only when ready, gated by the ``timer_tips`` feature)
    - Clock, phase message, progress bar
    - Breathing guide (only while running with guidance on)
    - Coaching overlay (only while running, gated by ``personal_trainer_ai``)
    - Main action button row (context-dependent)
    - Duration presets (only when ready or completed)

The widget owns one ``CountdownEngine`` at a time.  Choosing a new
duration disposes the current engine and builds a fresh one.
"""

from __future__ import annotations

from datetime import datetime

from loguru import logger
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QFrame, QProgressBar,
)

from ..audio.sounds import TimerAudio
from ..features import FeatureFlags, AI_COACHING, TIMER_TIPS
from ..recorder import SessionRecorder
from ..timer.breathing import BreathingRhythm
from ..timer.engine import (
    CountdownEngine, TimerPhase, format_time, validate_duration,
)
from .breathing_guide import BreathingGuide
from .coaching_overlay import CoachingOverlay
from .styles import DANGER_SECONDS, PALETTE, phase_color


DURATION_PRESETS = (30, 60, 120, 180, 300)  # seconds

PHASE_MESSAGES: dict[TimerPhase, str] = {
    TimerPhase.READY:     "Ready to Start",
    TimerPhase.RUNNING:   "Keep Going!",
    TimerPhase.PAUSED:    "Paused",
    TimerPhase.COMPLETED: "Completed!",
}

PRIMARY_LABELS: dict[TimerPhase, str] = {
    TimerPhase.READY:     "Start",
    TimerPhase.RUNNING:   "Pause",
    TimerPhase.PAUSED:    "Resume",
    TimerPhase.COMPLETED: "Do Again",
}

COACHING_CUES: dict[str, str] = {
    "start":         "Brace your core and keep your hips level.",
    "resume":        "Back at it. Squeeze your glutes and breathe.",
    "final_stretch": "Final seconds! Hold strong!",
}

TIP_MESSAGES = (
    "Keep a straight line from your head to your heels.",
    "Press the floor away to keep your shoulders stable.",
    "Breathe steadily. Holding your breath tires you out faster.",
    "Quality beats duration: stop when your form breaks.",
)


def state_message(phase: TimerPhase, remaining: int) -> str:
    """Short status line under the clock."""
    if phase == TimerPhase.RUNNING and remaining <= DANGER_SECONDS:
        return "Almost There!"
    return PHASE_MESSAGES[phase]


class TimerWidget(QWidget):
    """The timer card for a single exercise."""

    phase_changed = pyqtSignal(object)
    session_finished = pyqtSignal(int, bool)  # elapsed seconds, ran to zero

    def __init__(
        self,
        exercise_id: str,
        duration_seconds: int,
        *,
        audio: TimerAudio,
        recorder: SessionRecorder | None = None,
        features: FeatureFlags | None = None,
        breathing_enabled: bool = False,
        exercise_name: str | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._exercise_id = exercise_id
        self._exercise_name = exercise_name or exercise_id
        self._audio = audio
        self._recorder = recorder
        self._features = features or FeatureFlags()
        self._engine: CountdownEngine | None = None
        self._last_phase: TimerPhase = TimerPhase.READY
        self._tip_index: int = 0

        self._rhythm = BreathingRhythm(enabled=breathing_enabled, parent=self)

        self._build_ui()
        self._connect_signals()
        self._install_engine(duration_seconds)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(28, 20, 28, 24)
        layout.setSpacing(10)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        # ── header ───────────────────────────────────────────────────
        header = QHBoxLayout()
        self._title = QLabel(self._exercise_name, card)
        self._title.setStyleSheet("font-size: 18px; font-weight: 700;")
        header.addWidget(self._title)
        header.addStretch()
        self._sound_btn = QPushButton("", card)
        self._sound_btn.setObjectName("presetButton")
        header.addWidget(self._sound_btn)
        layout.addLayout(header)

        # ── tip (ready only) ─────────────────────────────────────────
        self._tip_overlay = CoachingOverlay(
            card, feature_check=self._features.checker(TIMER_TIPS),
        )
        layout.addWidget(self._tip_overlay)

        # ── clock ────────────────────────────────────────────────────
        self._time_label = QLabel("0:00", card)
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        self._status_label = QLabel("", card)
        self._status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._status_label.setStyleSheet(
            f"font-size: 15px; color: {PALETTE['text_muted']};"
        )
        layout.addWidget(self._status_label)

        self._progress = QProgressBar(card)
        self._progress.setRange(0, 1000)
        self._progress.setTextVisible(False)
        layout.addWidget(self._progress)

        # ── breathing + coaching ─────────────────────────────────────
        self._breathing_guide = BreathingGuide(self._rhythm, card)
        layout.addWidget(self._breathing_guide)

        self._coaching_overlay = CoachingOverlay(
            card, feature_check=self._features.checker(AI_COACHING),
        )
        layout.addWidget(self._coaching_overlay)

        # ── main controls ────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._stop_btn = QPushButton("Stop", card)
        self._stop_btn.setObjectName("dangerButton")

        self._primary_btn = QPushButton("Start", card)
        self._primary_btn.setObjectName("primaryButton")

        self._skip_btn = QPushButton("Skip", card)
        self._skip_btn.setToolTip("Abandon this hold without saving it")

        btn_row.addWidget(self._stop_btn)
        btn_row.addWidget(self._primary_btn)
        btn_row.addWidget(self._skip_btn)
        layout.addLayout(btn_row)

        # ── feedback line (last result) ──────────────────────────────
        self._feedback_label = QLabel("", card)
        self._feedback_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._feedback_label.setStyleSheet(
            f"font-size: 13px; color: {PALETTE['success']};"
        )
        layout.addWidget(self._feedback_label)

        # ── duration presets ─────────────────────────────────────────
        preset_row = QHBoxLayout()
        preset_row.setSpacing(8)
        preset_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._preset_btns: list[QPushButton] = []
        for seconds in DURATION_PRESETS:
            btn = QPushButton(format_time(seconds), card)
            btn.setObjectName("presetButton")
            btn.clicked.connect(lambda _checked=False, s=seconds: self.set_duration(s))
            self._preset_btns.append(btn)
            preset_row.addWidget(btn)
        layout.addLayout(preset_row)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._primary_btn.clicked.connect(self.toggle_start_pause)
        self._stop_btn.clicked.connect(self.stop)
        self._skip_btn.clicked.connect(self.skip)
        self._sound_btn.clicked.connect(self._audio.toggle_sound)
        self._audio.sound_enabled_changed.connect(self._refresh_sound_button)
        self._refresh_sound_button(self._audio.sound_enabled)

    # ── engine lifecycle ─────────────────────────────────────────────────

    @property
    def engine(self) -> CountdownEngine:
        return self._engine

    @property
    def rhythm(self) -> BreathingRhythm:
        return self._rhythm

    @property
    def exercise_id(self) -> str:
        return self._exercise_id

    def set_duration(self, seconds: int) -> None:
        """Replace the current countdown with a fresh one of *seconds*.

        Any session in progress is discarded without being recorded.
        """
        self._install_engine(seconds)
        self._feedback_label.setText("")

    def _install_engine(self, seconds: int) -> None:
        seconds = validate_duration(seconds)
        old = self._engine
        if old is not None:
            old.blockSignals(True)
            old.dispose()
            old.deleteLater()

        engine = CountdownEngine(
            seconds,
            self._on_engine_complete,
            on_completion_sound=self._audio.play_completion_sound,
            parent=self,
        )
        engine.tick.connect(self._on_tick)
        engine.phase_changed.connect(self._on_phase_changed)
        engine.countdown_cue.connect(self._audio.play_countdown_sound)
        self._engine = engine
        logger.debug("Timer set for {} ({})", format_time(seconds), self._exercise_id)

        self._last_phase = TimerPhase.READY
        self._on_phase_changed(engine.phase)

    def dispose(self) -> None:
        """Release every periodic resource this view owns."""
        if self._engine is not None:
            self._engine.dispose()
        self._rhythm.dispose()

    # ── user actions (thin forwarders) ───────────────────────────────────

    def start(self) -> None:
        self._engine.start()

    def pause(self) -> None:
        self._engine.pause()

    def resume(self) -> None:
        self._engine.resume()

    def stop(self) -> None:
        self._engine.stop()

    def reset(self) -> None:
        self._engine.reset()

    def skip(self) -> None:
        """Abandon the current hold without recording it."""
        self._engine.reset()

    def toggle_start_pause(self) -> None:
        phase = self._engine.phase
        if phase == TimerPhase.RUNNING:
            self.pause()
        elif phase == TimerPhase.PAUSED:
            self.resume()
        elif phase == TimerPhase.COMPLETED:
            self.reset()
        else:
            self.start()

    def set_breathing_enabled(self, enabled: bool) -> None:
        self._rhythm.set_enabled(enabled)

    def refresh_features(self) -> None:
        """Re-run feature checks after the flags changed."""
        self._tip_overlay.refresh()
        self._coaching_overlay.refresh()

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_phase_changed(self, phase: TimerPhase) -> None:
        previous = self._last_phase
        self._last_phase = phase
        running = phase == TimerPhase.RUNNING

        # ── breathing + coaching follow the running flag ─────────────
        self._rhythm.set_running(running)
        if running:
            cue = "resume" if previous == TimerPhase.PAUSED else "start"
            self._coaching_overlay.set_message(COACHING_CUES[cue])
        self._coaching_overlay.set_shown(running)

        # ── tip only before starting ─────────────────────────────────
        if phase == TimerPhase.READY and previous != TimerPhase.READY:
            self._tip_index += 1
        self._tip_overlay.set_message(TIP_MESSAGES[self._tip_index % len(TIP_MESSAGES)])
        self._tip_overlay.set_shown(phase == TimerPhase.READY)

        # ── controls ─────────────────────────────────────────────────
        self._primary_btn.setText(PRIMARY_LABELS[phase])
        in_session = phase in (TimerPhase.RUNNING, TimerPhase.PAUSED)
        self._stop_btn.setVisible(in_session)
        self._skip_btn.setVisible(in_session)
        for btn in self._preset_btns:
            btn.setEnabled(not in_session)

        self._refresh_display(self._engine.remaining)
        self.phase_changed.emit(phase)

    def _on_tick(self, remaining: int) -> None:
        if remaining == DANGER_SECONDS and self._engine.is_running:
            self._coaching_overlay.set_message(COACHING_CUES["final_stretch"])
        self._refresh_display(remaining)

    def _on_engine_complete(self, elapsed: int) -> None:
        natural = self._engine.phase == TimerPhase.COMPLETED
        if not natural and self._engine.stopped_from not in (
            TimerPhase.RUNNING, TimerPhase.PAUSED,
        ):
            # Nothing was in progress; a completed hold was already recorded.
            logger.debug(
                "Stop from {} ignored for {}",
                self._engine.stopped_from, self._exercise_id,
            )
            return
        if natural:
            logger.info("{} completed: {}s", self._exercise_id, elapsed)
            self._feedback_label.setText(f"Nice hold! {format_time(elapsed)} done.")
        else:
            logger.info("{} stopped early after {}s", self._exercise_id, elapsed)
            self._feedback_label.setText(f"Stopped at {format_time(elapsed)}.")

        if elapsed > 0:
            self._report_session(elapsed)
        self.session_finished.emit(elapsed, natural)

    def _report_session(self, elapsed: int) -> None:
        if self._recorder is None:
            return
        try:
            self._recorder.record(self._exercise_id, elapsed, datetime.now())
        except Exception:
            logger.exception("Session recorder failed for {}", self._exercise_id)

    def _refresh_display(self, remaining: int) -> None:
        phase = self._engine.phase
        color = phase_color(phase, remaining)
        self._time_label.setText(format_time(remaining))
        self._time_label.setStyleSheet(
            f"font-size: 64px; font-weight: 800; color: {color};"
        )
        self._status_label.setText(state_message(phase, remaining))
        self._progress.setValue(round(self._engine.progress * 10))

    def _refresh_sound_button(self, enabled: bool) -> None:
        self._sound_btn.setText("Sound: On" if enabled else "Sound: Off")

    # ── read-only views for the shell and tests ──────────────────────────

    @property
    def time_text(self) -> str:
        return self._time_label.text()

    @property
    def status_text(self) -> str:
        return self._status_label.text()

    @property
    def feedback_text(self) -> str:
        return self._feedback_label.text()

    @property
    def coaching_text(self) -> str | None:
        return self._coaching_overlay.displayed_text

    @property
    def tip_text(self) -> str | None:
        return self._tip_overlay.displayed_text
