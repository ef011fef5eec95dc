"""Inhale / exhale oscillator shown during an active countdown.

The rhythm runs on its own interval and only reads a ``running`` flag
mirrored from the countdown engine.  It never touches the engine, so
switching guidance on or off cannot disturb countdown timing.
"""

from __future__ import annotations

from enum import Enum

from loguru import logger
from PyQt6.QtCore import QObject, pyqtSignal

from .interval import Interval, acquire_interval, release_interval


class BreathingPhase(Enum):
    INHALE = "inhale"
    EXHALE = "exhale"


BREATH_PERIOD_MS = 4000  # 4 s in, 4 s out


class BreathingRhythm(QObject):
    """Toggles ``phase`` every ``period_ms`` while enabled and running.

    The phase is kept as-is when the rhythm goes inactive; it resumes
    from where it left off.
    """

    phase_changed = pyqtSignal(object)
    active_changed = pyqtSignal(bool)

    def __init__(
        self,
        enabled: bool = False,
        running: bool = False,
        *,
        period_ms: int = BREATH_PERIOD_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._period_ms = period_ms
        self._enabled = enabled
        self._running = running
        self._phase = BreathingPhase.INHALE
        self._interval: Interval | None = None
        self._sync()

    # ── public API ────────────────────────────────────────────────────

    @property
    def phase(self) -> BreathingPhase:
        return self._phase

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def running(self) -> bool:
        return self._running

    @property
    def active(self) -> bool:
        return self._enabled and self._running

    @property
    def display_phase(self) -> BreathingPhase | None:
        """The phase to show, or ``None`` when guidance is inactive."""
        return self._phase if self.active else None

    @property
    def has_active_interval(self) -> bool:
        return self._interval is not None and self._interval.active

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        self._sync()

    def set_running(self, running: bool) -> None:
        if running == self._running:
            return
        self._running = running
        self._sync()

    def dispose(self) -> None:
        release_interval(self._interval)
        self._interval = None
        self._enabled = False
        self._running = False

    # ── internal ──────────────────────────────────────────────────────

    def _sync(self) -> None:
        was_active = self._interval is not None
        if self.active and self._interval is None:
            self._interval = acquire_interval(
                self._period_ms, self._on_toggle, self,
            )
        elif not self.active and self._interval is not None:
            release_interval(self._interval)
            self._interval = None
        if was_active != (self._interval is not None):
            logger.debug("Breathing guidance active={}", self.active)
            self.active_changed.emit(self.active)

    def _on_toggle(self) -> None:
        if not self.active:
            return
        self._phase = (
            BreathingPhase.EXHALE
            if self._phase == BreathingPhase.INHALE
            else BreathingPhase.INHALE
        )
        self.phase_changed.emit(self._phase)
