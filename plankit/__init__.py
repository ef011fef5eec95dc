"""PlankIt: workout countdown timer with audio, breathing and coaching cues."""

__version__ = "0.1.0"
