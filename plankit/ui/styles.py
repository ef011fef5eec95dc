"""QSS stylesheet, palette, and phase colors for PlankIt."""

from __future__ import annotations

from ..timer.engine import TimerPhase

PALETTE: dict[str, str] = {
    "bg":           "#101826",
    "bg_secondary": "#1A2438",
    "surface":      "#24314A",
    "accent":       "#3B82F6",   # primary blue
    "accent2":      "#60A5FA",
    "text":         "#E5ECF6",
    "text_muted":   "#7C8AA5",
    "success":      "#22C55E",
    "warning":      "#EAB308",
    "danger":       "#EF4444",
    "border":       "#2B3A55",
}

# Seconds left at which the running color shifts.
WARNING_SECONDS = 30
DANGER_SECONDS = 10


def phase_color(
    phase: TimerPhase,
    remaining: int,
    palette: dict[str, str] | None = None,
) -> str:
    """Clock color for *phase*; running shifts to warning, then danger."""
    p = palette or PALETTE
    if phase == TimerPhase.COMPLETED:
        return p["success"]
    if phase == TimerPhase.PAUSED:
        return p["text_muted"]
    if phase == TimerPhase.RUNNING:
        if remaining <= DANGER_SECONDS:
            return p["danger"]
        if remaining <= WARNING_SECONDS:
            return p["warning"]
    return p["accent"]


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    return f"""
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 14px;
    }}

    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 10px 20px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 14px 36px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent2']};
    }}

    QPushButton#dangerButton {{
        color: {p['danger']};
    }}

    QPushButton#presetButton {{
        padding: 6px 14px;
        font-size: 13px;
    }}

    QProgressBar {{
        background-color: {p['bg_secondary']};
        border: none;
        border-radius: 4px;
        max-height: 8px;
    }}

    QProgressBar::chunk {{
        background-color: {p['accent']};
        border-radius: 4px;
    }}

    QFrame#card {{
        background-color: {p['bg_secondary']};
        border-radius: 16px;
    }}
    """
