"""Capability checks for optional timer features.

The timer only ever asks "is this feature on?".  Where the answer comes
from (settings, a remote flag service, a subscription tier) is up to
whoever builds the ``FeatureFlags``.
"""

from __future__ import annotations

from typing import Mapping

AI_COACHING = "personal_trainer_ai"
TIMER_TIPS = "timer_tips"


class FeatureFlags:
    """In-process feature switchboard.  Unknown features are off."""

    def __init__(self, flags: Mapping[str, bool] | None = None) -> None:
        self._flags: dict[str, bool] = dict(flags or {})

    @classmethod
    def from_settings(cls, settings) -> "FeatureFlags":
        return cls(settings.feature_flags)

    def is_enabled(self, name: str) -> bool:
        return bool(self._flags.get(name, False))

    def set_enabled(self, name: str, enabled: bool) -> None:
        self._flags[name] = enabled

    def checker(self, name: str):
        """Zero-argument callable answering ``is_enabled(name)`` at call time."""
        return lambda: self.is_enabled(name)

    def as_dict(self) -> dict[str, bool]:
        return dict(self._flags)
