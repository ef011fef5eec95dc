"""Countdown state machine for PlankIt.

Phases
------
READY       Waiting for the user to start.  Remaining = full duration.
RUNNING     Counting down once per second.
PAUSED      Frozen; remembers the remaining time.
COMPLETED   Ran all the way to zero.

Transitions
-----------
READY | PAUSED → RUNNING          (start / resume)
RUNNING → PAUSED                  (pause)
RUNNING → COMPLETED               (remaining reaches 0)
Any → READY                       (stop / reset)

One engine instance serves exactly one target duration.  Picking a new
duration means building a new engine and disposing the old one.

``stop()`` reports partial progress through the same ``on_complete``
callback used for natural completion; callers tell the two apart by
comparing the reported seconds to ``target_duration``.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from loguru import logger
from PyQt6.QtCore import QObject, pyqtSignal

from .interval import Interval, acquire_interval, release_interval


# ── enums ─────────────────────────────────────────────────────────────────


class TimerPhase(Enum):
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 1000
COUNTDOWN_CUE_SECONDS = (10, 5, 3, 2, 1)


class InvalidDurationError(ValueError):
    """Raised when a timer is configured with a non-positive duration."""


def format_time(seconds: int) -> str:
    """``m:ss`` clock text, e.g. ``90 → "1:30"``."""
    m, s = divmod(max(0, seconds), 60)
    return f"{m}:{s:02d}"


def validate_duration(seconds: object) -> int:
    """Return *seconds* if it is a positive integer, else raise."""
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise InvalidDurationError(
            f"duration must be a whole number of seconds, got {seconds!r}"
        )
    if seconds <= 0:
        raise InvalidDurationError(
            f"duration must be positive, got {seconds}"
        )
    return seconds


# ── engine ────────────────────────────────────────────────────────────────


class CountdownEngine(QObject):
    """Single-duration countdown with a 1-second tick.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted after every decrement while running.
    phase_changed(new_phase: TimerPhase)
        Emitted on every phase transition.
    countdown_cue(seconds_left: int)
        Emitted when the remaining time hits one of
        ``COUNTDOWN_CUE_SECONDS``.

    Callbacks
    ---------
    on_complete(elapsed_seconds: int)
        Called with the full duration on natural completion and with the
        partial elapsed time on ``stop()``.
    on_completion_sound()
        Called on the RUNNING → COMPLETED transition, strictly before
        ``on_complete``.
    """

    tick = pyqtSignal(int)
    phase_changed = pyqtSignal(object)
    countdown_cue = pyqtSignal(int)

    def __init__(
        self,
        target_duration_seconds: int,
        on_complete: Callable[[int], None] | None = None,
        *,
        on_completion_sound: Callable[[], object] | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._target: int = validate_duration(target_duration_seconds)
        self._on_complete = on_complete
        self._on_completion_sound = on_completion_sound

        self._phase: TimerPhase = TimerPhase.READY
        self._remaining: int = self._target
        self._interval: Interval | None = None
        self._disposed: bool = False
        self._stopped_from: TimerPhase | None = None

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def phase(self) -> TimerPhase:
        return self._phase

    @property
    def target_duration(self) -> int:
        return self._target

    @property
    def remaining(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def elapsed(self) -> int:
        return self._target - self._remaining

    @property
    def progress(self) -> float:
        """0 → 100 percent through the countdown."""
        return max(0.0, min(100.0, self.elapsed / self._target * 100))

    @property
    def is_running(self) -> bool:
        return self._phase == TimerPhase.RUNNING

    @property
    def stopped_from(self) -> TimerPhase | None:
        """Phase the most recent ``stop()`` was called from."""
        return self._stopped_from

    @property
    def has_active_interval(self) -> bool:
        return self._interval is not None and self._interval.active

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Begin or continue counting down.  Valid from READY or PAUSED."""
        if self._disposed:
            return
        if self._phase not in (TimerPhase.READY, TimerPhase.PAUSED):
            return
        self._acquire_interval()
        self._set_phase(TimerPhase.RUNNING)

    def pause(self) -> None:
        if self._phase != TimerPhase.RUNNING:
            return
        self._release_interval()
        self._set_phase(TimerPhase.PAUSED)

    def resume(self) -> None:
        """Resume from PAUSED.  No effect from any other phase."""
        if self._phase != TimerPhase.PAUSED:
            return
        self.start()

    def stop(self) -> None:
        """End the countdown and report the seconds done so far.

        Valid from any phase.  From READY that is 0; from COMPLETED it is
        the full duration again.  ``stopped_from`` holds the phase the
        stop interrupted, so listeners can tell a real early stop apart.
        """
        self._stopped_from = self._phase
        elapsed = self.elapsed
        self._release_interval()
        self._remaining = self._target
        if self._phase != TimerPhase.READY:
            self._set_phase(TimerPhase.READY)
        logger.debug("Countdown stopped after {}s of {}s", elapsed, self._target)
        if self._on_complete is not None:
            self._on_complete(elapsed)

    def reset(self) -> None:
        """Return to READY with the full duration.  Never reports."""
        self._release_interval()
        self._remaining = self._target
        if self._phase != TimerPhase.READY:
            self._set_phase(TimerPhase.READY)

    def dispose(self) -> None:
        """Release the interval for good.  The engine ignores later starts.

        A run in progress is abandoned without a report and the phase
        goes back to READY.
        """
        if self._phase in (TimerPhase.RUNNING, TimerPhase.PAUSED):
            self.reset()
        self._release_interval()
        self._disposed = True

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _acquire_interval(self) -> None:
        if self._interval is not None:
            return
        self._interval = acquire_interval(TICK_INTERVAL_MS, self._on_tick, self)

    def _release_interval(self) -> None:
        release_interval(self._interval)
        self._interval = None

    def _on_tick(self) -> None:
        # Stale ticks after pause/stop/reset are dropped.
        if self._phase != TimerPhase.RUNNING:
            return

        if self._remaining - 1 <= 0:
            self._finish()
            return

        self._remaining -= 1
        self.tick.emit(self._remaining)
        if self._remaining in COUNTDOWN_CUE_SECONDS:
            self.countdown_cue.emit(self._remaining)

    def _finish(self) -> None:
        self._remaining = 0
        self._release_interval()
        self._set_phase(TimerPhase.COMPLETED)
        self.tick.emit(0)
        logger.debug("Countdown completed ({}s)", self._target)

        # Sound first, then the completion report.
        if self._on_completion_sound is not None:
            try:
                self._on_completion_sound()
            except Exception:
                logger.exception("Completion sound failed; continuing")

        if self._on_complete is not None:
            self._on_complete(self._target)

    def _set_phase(self, new_phase: TimerPhase) -> None:
        self._phase = new_phase
        self.phase_changed.emit(new_phase)
