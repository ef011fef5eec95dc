"""Owned periodic timer handles.

Every repeating callback in PlankIt goes through an ``Interval`` that is
returned by ``acquire_interval()`` and handed back to ``release_interval()``.
Release is idempotent, and a released handle never calls back again even if
Qt still has a queued ``timeout`` for it.

Usage::

    handle = acquire_interval(1000, self._on_tick, parent=self)
    ...
    release_interval(handle)
    handle = None
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import QObject, QTimer


class Interval(QObject):
    """A started-or-cancelled wrapper around a repeating ``QTimer``."""

    def __init__(
        self,
        interval_ms: int,
        callback: Callable[[], None],
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self._callback = callback
        self._cancelled = False

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._fire)

    # ── public API ────────────────────────────────────────────────────

    @property
    def interval_ms(self) -> int:
        return self._qt_timer.interval()

    @property
    def active(self) -> bool:
        """True while the underlying timer is scheduled."""
        return not self._cancelled and self._qt_timer.isActive()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        if self._cancelled:
            raise RuntimeError("cannot restart a released interval")
        self._qt_timer.start()

    def cancel(self) -> None:
        """Stop the timer.  Safe to call any number of times."""
        if self._cancelled:
            return
        self._cancelled = True
        self._qt_timer.stop()

    # ── internal ──────────────────────────────────────────────────────

    def _fire(self) -> None:
        # A timeout already queued before cancel() must not reach the owner.
        if self._cancelled:
            return
        self._callback()


def acquire_interval(
    interval_ms: int,
    callback: Callable[[], None],
    parent: QObject | None = None,
) -> Interval:
    """Create and start a repeating interval owned by *parent*."""
    handle = Interval(interval_ms, callback, parent)
    handle.start()
    return handle


def release_interval(handle: Interval | None) -> None:
    """Cancel *handle* and schedule it for deletion.  ``None`` is a no-op."""
    if handle is None:
        return
    if handle.cancelled:
        return
    handle.cancel()
    handle.deleteLater()
