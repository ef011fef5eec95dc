"""UI package."""

from .timer_widget import TimerWidget
from .breathing_guide import BreathingGuide
from .coaching_overlay import CoachingOverlay
from .settings_dialog import SettingsDialog

__all__ = [
    "TimerWidget",
    "BreathingGuide",
    "CoachingOverlay",
    "SettingsDialog",
]
