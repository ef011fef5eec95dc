"""Shared pytest fixtures for PlankIt tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from plankit.audio.sounds import TimerAudio
from plankit.features import FeatureFlags
from plankit.recorder import InMemorySessionRecorder
from plankit.timer.engine import CountdownEngine


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep settings and cached sounds out of the real home directory."""
    monkeypatch.setattr("plankit.settings.APP_SUPPORT_DIR", tmp_path)
    monkeypatch.setattr("plankit.settings.SETTINGS_PATH", tmp_path / "settings.json")
    monkeypatch.setattr("plankit.audio.sounds.SOUNDS_DIR", tmp_path / "sounds")
    yield


@pytest.fixture
def completions():
    """List that collects ``on_complete`` reports."""
    return []


@pytest.fixture
def engine(qapp, completions):
    """60-second engine reporting into ``completions``."""
    eng = CountdownEngine(60, completions.append)
    yield eng
    eng.dispose()


@pytest.fixture
def audio(qapp, tmp_path):
    return TimerAudio(parent=None, sounds_dir=tmp_path / "sounds")


@pytest.fixture
def recorder():
    return InMemorySessionRecorder()


@pytest.fixture
def features():
    return FeatureFlags({"personal_trainer_ai": True, "timer_tips": True})
