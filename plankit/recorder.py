"""Session recorder interface.

The timer reports finished sessions and forgets about them.  Storing
them, retrying, and showing "could not save" errors all belong to the
recorder implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class SessionRecord:
    exercise_id: str
    elapsed_seconds: int
    timestamp: datetime


class SessionRecorder(Protocol):
    def record(
        self, exercise_id: str, elapsed_seconds: int, timestamp: datetime,
    ) -> None: ...


class InMemorySessionRecorder:
    """Keeps records for the lifetime of the process."""

    def __init__(self) -> None:
        self.records: list[SessionRecord] = []

    def record(
        self, exercise_id: str, elapsed_seconds: int, timestamp: datetime,
    ) -> None:
        self.records.append(SessionRecord(exercise_id, elapsed_seconds, timestamp))

    @property
    def last(self) -> SessionRecord | None:
        return self.records[-1] if self.records else None

    def __len__(self) -> int:
        return len(self.records)
