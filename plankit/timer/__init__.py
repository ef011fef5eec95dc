"""Timer package."""

from .engine import (
    CountdownEngine,
    TimerPhase,
    InvalidDurationError,
    COUNTDOWN_CUE_SECONDS,
    TICK_INTERVAL_MS,
    format_time,
    validate_duration,
)
from .breathing import BreathingRhythm, BreathingPhase, BREATH_PERIOD_MS
from .interval import Interval, acquire_interval, release_interval

__all__ = [
    "CountdownEngine",
    "TimerPhase",
    "InvalidDurationError",
    "COUNTDOWN_CUE_SECONDS",
    "TICK_INTERVAL_MS",
    "format_time",
    "validate_duration",
    "BreathingRhythm",
    "BreathingPhase",
    "BREATH_PERIOD_MS",
    "Interval",
    "acquire_interval",
    "release_interval",
]
