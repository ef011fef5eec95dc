"""Application settings with JSON persistence.

Settings are stored at:
    ~/.plankit/settings.json

Usage::

    settings = load_settings()
    settings.sound_enabled = False
    save_settings(settings)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path

from loguru import logger

from .timer.engine import InvalidDurationError, validate_duration


APP_SUPPORT_DIR = Path.home() / ".plankit"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


def _default_feature_flags() -> dict[str, bool]:
    return {"personal_trainer_ai": False, "timer_tips": True}


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    default_duration: int = 60             # seconds
    breathing_guidance: bool = False

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    countdown_sounds_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── optional features ─────────────────────────────────────────────
    feature_flags: dict[str, bool] = field(default_factory=_default_feature_flags)

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"

    # ── window ────────────────────────────────────────────────────────
    window_width: int = 460
    window_height: int = 680


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    if not SETTINGS_PATH.exists():
        return Settings()
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings file {}: {}", SETTINGS_PATH, exc)
        return Settings()
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file {}: not a JSON object", SETTINGS_PATH)
        return Settings()
    # Only use keys that exist in the dataclass
    valid_keys = {f.name for f in fields(Settings)}
    filtered = {k: v for k, v in data.items() if k in valid_keys}
    if "default_duration" in filtered:
        try:
            validate_duration(filtered["default_duration"])
        except InvalidDurationError as exc:
            logger.warning("Ignoring default_duration in {}: {}", SETTINGS_PATH, exc)
            del filtered["default_duration"]
    return Settings(**filtered)


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
