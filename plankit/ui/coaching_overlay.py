"""Coaching message overlay shown over the timer.

Displays whatever text the caller hands it.  It renders only when the
caller says it should be shown, a message is present, and the feature
check (e.g. "is AI coaching on for this user?") passes.  The fade in
and out is cosmetic.

Usage::

    overlay = CoachingOverlay(parent, feature_check=flags.checker(AI_COACHING))
    overlay.set_message("Brace your core.")
    overlay.set_shown(True)
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import Qt, QPropertyAnimation, QEasingCurve
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QGraphicsOpacityEffect,
)

from .styles import PALETTE


def coaching_text(
    message: str | None,
    shown: bool,
    feature_enabled: bool,
) -> str | None:
    """The text to render, or ``None`` when nothing should appear."""
    if not feature_enabled or not shown:
        return None
    if not message:
        return None
    return message


class CoachingOverlay(QWidget):
    """Fading message bubble.  Holds no state beyond its inputs."""

    FADE_IN_MS = 250
    FADE_OUT_MS = 400

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        feature_check: Callable[[], bool] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self._feature_check = feature_check
        self._message: str | None = None
        self._shown: bool = False
        self._rendered: str | None = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 8, 16, 8)
        self._label = QLabel("", self)
        self._label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._label.setWordWrap(True)
        self._label.setStyleSheet(
            f"font-size: 14px; font-style: italic; color: {PALETTE['accent2']};"
            "background: transparent;"
        )
        layout.addWidget(self._label)

        self._opacity = QGraphicsOpacityEffect(self)
        self.setGraphicsEffect(self._opacity)
        self._opacity.setOpacity(0.0)

        self._fade_anim = QPropertyAnimation(self._opacity, b"opacity", self)
        self._fade_anim.finished.connect(self._on_fade_finished)
        self.hide()

    # ── inputs ───────────────────────────────────────────────────────────

    def set_message(self, message: str | None) -> None:
        self._message = message
        self.refresh()

    def set_shown(self, shown: bool) -> None:
        self._shown = shown
        self.refresh()

    @property
    def message(self) -> str | None:
        return self._message

    # ── output ───────────────────────────────────────────────────────────

    @property
    def displayed_text(self) -> str | None:
        """What the overlay is presenting right now (``None`` = nothing)."""
        return self._rendered

    def refresh(self) -> None:
        """Re-evaluate the inputs and the feature check."""
        enabled = self._feature_check() if self._feature_check else True
        text = coaching_text(self._message, self._shown, enabled)
        if text == self._rendered:
            return
        self._rendered = text
        if text is None:
            self._fade(0.0, self.FADE_OUT_MS, QEasingCurve.Type.InCubic)
        else:
            self._label.setText(text)
            self.show()
            self._fade(1.0, self.FADE_IN_MS, QEasingCurve.Type.OutCubic)

    # ── internal ─────────────────────────────────────────────────────────

    def _fade(self, target: float, duration: int, curve: QEasingCurve.Type) -> None:
        self._fade_anim.stop()
        self._fade_anim.setDuration(duration)
        self._fade_anim.setStartValue(self._opacity.opacity())
        self._fade_anim.setEndValue(target)
        self._fade_anim.setEasingCurve(curve)
        self._fade_anim.start()

    def _on_fade_finished(self) -> None:
        if self._rendered is None:
            self.hide()
