"""Timer audio cues synthesized with numpy and played through QSoundEffect.

Sounds are rendered once as 16-bit mono WAV files and cached to disk.

Sound names
-----------
- ``completion``     : 800 Hz tone, ~1 s, linear attack + exponential decay
- ``countdown``      : short soft beep for 10 s and 5 s left
- ``countdown_final``: higher beep for the last three seconds
"""

from __future__ import annotations

import io
import wave
from pathlib import Path
from typing import Callable

import numpy as np
from loguru import logger
from PyQt6.QtCore import QObject, QUrl, pyqtSignal
from PyQt6.QtMultimedia import QSoundEffect


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / ".plankit"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = (
    "completion",
    "countdown",
    "countdown_final",
)

SAMPLE_RATE = 44100

COMPLETION_FREQ = 800.0
COMPLETION_SECONDS = 1.0
FINAL_COUNTDOWN_SECONDS = 3  # beeps at or below this use the higher pitch


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _attack_decay_envelope(
    length: int,
    attack: int,
    peak: float = 0.3,
    floor: float = 0.01,
) -> np.ndarray:
    """Linear ramp 0 → *peak* over *attack* samples, then an exponential
    fall from *peak* to *floor* across the rest."""
    env = np.zeros(length, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, peak, a)
    rest = length - a
    if rest > 0:
        env[a:] = np.geomspace(peak, floor, rest)
    return env


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_completion() -> bytes:
    """Completion: single 800 Hz sine, 10 ms attack then 1 s decay."""
    tone = _sine(COMPLETION_FREQ, COMPLETION_SECONDS)
    env = _attack_decay_envelope(len(tone), attack=int(SAMPLE_RATE * 0.01))
    return _to_wav_bytes(tone * env)


def _beep(freq: float) -> bytes:
    duration = 0.15
    tone = _sine(freq, duration)
    env = _attack_decay_envelope(
        len(tone), attack=int(SAMPLE_RATE * 0.005), peak=0.25,
    )
    # Trailing silence so QSoundEffect doesn't clip the tail
    return _to_wav_bytes(np.concatenate([tone * env, np.zeros(int(SAMPLE_RATE * 0.03))]))


def _generate_countdown() -> bytes:
    return _beep(600.0)


def _generate_countdown_final() -> bytes:
    return _beep(1000.0)


_GENERATORS: dict[str, Callable[[], bytes]] = {
    "completion": _generate_completion,
    "countdown": _generate_countdown,
    "countdown_final": _generate_countdown_final,
}


# ═══════════════════════════════════════════════════════════════════════════
#  TIMER AUDIO
# ═══════════════════════════════════════════════════════════════════════════


class TimerAudio(QObject):
    """Completion and countdown cues with user-controlled muting.

    ``play_*`` methods never raise.  They return ``True`` when a sound was
    handed to the audio backend and ``False`` when muted or unavailable.

    Usage::

        audio = TimerAudio(parent=self, sound_enabled=settings.sound_enabled)
        audio.sound_enabled_changed.connect(remember_preference)
        audio.play_completion_sound()
    """

    sound_enabled_changed = pyqtSignal(bool)
    countdown_sounds_enabled_changed = pyqtSignal(bool)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sound_enabled: bool = True,
        countdown_sounds_enabled: bool = True,
        volume: int = 70,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._sound_enabled = sound_enabled
        self._countdown_enabled = countdown_sounds_enabled
        self._volume = max(0, min(volume, 100)) / 100.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    # ── preferences ───────────────────────────────────────────────────

    @property
    def sound_enabled(self) -> bool:
        return self._sound_enabled

    def set_sound_enabled(self, enabled: bool) -> None:
        if enabled == self._sound_enabled:
            return
        self._sound_enabled = enabled
        self.sound_enabled_changed.emit(enabled)

    def toggle_sound(self) -> bool:
        """Flip ``sound_enabled`` and return the new value."""
        self.set_sound_enabled(not self._sound_enabled)
        return self._sound_enabled

    @property
    def countdown_sounds_enabled(self) -> bool:
        return self._countdown_enabled

    def set_countdown_sounds_enabled(self, enabled: bool) -> None:
        if enabled == self._countdown_enabled:
            return
        self._countdown_enabled = enabled
        self.countdown_sounds_enabled_changed.emit(enabled)

    def toggle_countdown_sounds(self) -> bool:
        self.set_countdown_sounds_enabled(not self._countdown_enabled)
        return self._countdown_enabled

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    # ── cues ──────────────────────────────────────────────────────────

    def play_completion_sound(self) -> bool:
        if not self._sound_enabled:
            return False
        return self._play("completion")

    def play_countdown_sound(self, seconds_left: int) -> bool:
        if not (self._sound_enabled and self._countdown_enabled):
            return False
        if seconds_left <= FINAL_COUNTDOWN_SECONDS:
            return self._play("countdown_final")
        return self._play("countdown")

    # ── internal ──────────────────────────────────────────────────────

    def _play(self, name: str) -> bool:
        effect = self._effects.get(name)
        if effect is None:
            return False
        if effect.status() == QSoundEffect.Status.Error:
            logger.warning("Sound {!r} unavailable on this audio backend", name)
            return False
        effect.play()
        return True

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        try:
            self._sounds_dir.mkdir(parents=True, exist_ok=True)
            for name, gen_fn in _GENERATORS.items():
                path = self._sounds_dir / f"{name}.wav"
                if not path.exists():
                    path.write_bytes(gen_fn())
        except OSError as exc:
            logger.warning("Could not cache timer sounds in {}: {}", self._sounds_dir, exc)

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[name] = effect
