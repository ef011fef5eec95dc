"""Audio package."""

from .sounds import TimerAudio, SOUND_NAMES

__all__ = ["TimerAudio", "SOUND_NAMES"]
