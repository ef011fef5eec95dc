"""Shared test helpers for PlankIt."""

from plankit.timer.engine import CountdownEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def run_ticks(engine: CountdownEngine, count: int) -> None:
    """Deliver *count* one-second ticks without waiting on the clock."""
    for _ in range(count):
        engine._on_tick()


def complete_countdown(engine: CountdownEngine) -> None:
    """Tick until the engine reaches zero."""
    run_ticks(engine, engine.remaining)
