"""Tests for clock colors, the stylesheet, presets, and logger setup."""

import pytest
from loguru import logger

from plankit.logger import setup_logger
from plankit.timer.engine import TimerPhase
from plankit.ui.styles import PALETTE, build_stylesheet, phase_color
from plankit.ui.timer_widget import DURATION_PRESETS


class TestPhaseColor:

    @pytest.mark.parametrize("remaining, key", [
        (60, "accent"), (31, "accent"), (30, "warning"),
        (11, "warning"), (10, "danger"), (1, "danger"),
    ])
    def test_running_thresholds(self, remaining, key):
        assert phase_color(TimerPhase.RUNNING, remaining) == PALETTE[key]

    def test_paused_is_muted_regardless_of_time(self):
        assert phase_color(TimerPhase.PAUSED, 5) == PALETTE["text_muted"]

    def test_completed_is_success(self):
        assert phase_color(TimerPhase.COMPLETED, 0) == PALETTE["success"]

    def test_ready_ignores_low_duration(self):
        assert phase_color(TimerPhase.READY, 5) == PALETTE["accent"]

    def test_custom_palette(self):
        palette = dict(PALETTE, danger="#FF0000")
        assert phase_color(TimerPhase.RUNNING, 3, palette) == "#FF0000"


def test_stylesheet_uses_palette():
    qss = build_stylesheet()
    assert PALETTE["accent"] in qss
    assert "QPushButton#primaryButton" in qss


def test_presets_are_valid_durations():
    assert DURATION_PRESETS == (30, 60, 120, 180, 300)


class TestLogger:

    def test_file_sink_receives_messages(self, tmp_path):
        log_file = tmp_path / "logs" / "plankit.log"
        setup_logger("DEBUG", log_file=log_file)
        logger.info("hold finished")
        logger.remove()
        assert "hold finished" in log_file.read_text(encoding="utf-8")

    def test_level_filters_file_sink(self, tmp_path):
        log_file = tmp_path / "plankit.log"
        setup_logger("WARNING", log_file=log_file)
        logger.info("quiet")
        logger.warning("loud")
        logger.remove()
        text = log_file.read_text(encoding="utf-8")
        assert "loud" in text
        assert "quiet" not in text
