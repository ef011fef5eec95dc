"""Tests for the timer view that wires engine, audio, breathing, coaching
and the session recorder together, plus the main window shortcuts."""

from __future__ import annotations

from datetime import datetime

import pytest

from plankit.features import FeatureFlags, AI_COACHING, TIMER_TIPS
from plankit.settings import Settings
from plankit.timer.breathing import BreathingPhase
from plankit.timer.engine import TimerPhase, InvalidDurationError
from plankit.ui.timer_widget import (
    TimerWidget, COACHING_CUES, TIP_MESSAGES, state_message,
)

from helpers import SignalCollector, run_ticks, complete_countdown


@pytest.fixture
def widget(qapp, audio, recorder, features):
    w = TimerWidget(
        "forearm_plank", 30,
        audio=audio, recorder=recorder, features=features,
        breathing_enabled=True,
    )
    yield w
    w.dispose()


class FailingRecorder:
    def record(self, exercise_id, elapsed_seconds, timestamp):
        raise ConnectionError("offline")


# ═══════════════════════════════════════════════════════════════════════
#  FORWARDING + DISPLAY
# ═══════════════════════════════════════════════════════════════════════


class TestForwarding:

    def test_initial_display(self, widget):
        assert widget.engine.phase == TimerPhase.READY
        assert widget.time_text == "0:30"
        assert widget.status_text == "Ready to Start"

    def test_start_pause_resume(self, widget):
        widget.start()
        assert widget.engine.phase == TimerPhase.RUNNING
        widget.pause()
        assert widget.engine.phase == TimerPhase.PAUSED
        widget.resume()
        assert widget.engine.phase == TimerPhase.RUNNING

    def test_toggle_cycles_through_phases(self, widget):
        widget.toggle_start_pause()
        assert widget.engine.phase == TimerPhase.RUNNING
        widget.toggle_start_pause()
        assert widget.engine.phase == TimerPhase.PAUSED
        widget.toggle_start_pause()
        assert widget.engine.phase == TimerPhase.RUNNING
        complete_countdown(widget.engine)
        widget.toggle_start_pause()  # "Do Again"
        assert widget.engine.phase == TimerPhase.READY

    def test_tick_updates_clock(self, widget):
        widget.start()
        run_ticks(widget.engine, 5)
        assert widget.time_text == "0:25"

    def test_status_switches_near_end(self, widget):
        widget.start()
        run_ticks(widget.engine, 19)
        assert widget.status_text == "Keep Going!"
        widget.engine._on_tick()
        assert widget.status_text == "Almost There!"

    def test_phase_changed_forwarded(self, widget):
        c = SignalCollector()
        widget.phase_changed.connect(c)
        widget.start()
        widget.pause()
        assert c.items == [TimerPhase.RUNNING, TimerPhase.PAUSED]

    def test_state_message(self):
        assert state_message(TimerPhase.COMPLETED, 0) == "Completed!"
        assert state_message(TimerPhase.PAUSED, 5) == "Paused"
        assert state_message(TimerPhase.RUNNING, 11) == "Keep Going!"
        assert state_message(TimerPhase.RUNNING, 10) == "Almost There!"


# ═══════════════════════════════════════════════════════════════════════
#  COMPLETION + RECORDING
# ═══════════════════════════════════════════════════════════════════════


class TestSessionReporting:

    def test_natural_completion_recorded(self, widget, recorder):
        c = SignalCollector()
        widget.session_finished.connect(c)
        widget.start()
        complete_countdown(widget.engine)

        assert len(recorder) == 1
        rec = recorder.last
        assert rec.exercise_id == "forearm_plank"
        assert rec.elapsed_seconds == 30
        assert isinstance(rec.timestamp, datetime)
        assert c.last == (30, True)
        assert widget.status_text == "Completed!"
        assert "0:30" in widget.feedback_text

    def test_manual_stop_recorded(self, widget, recorder):
        c = SignalCollector()
        widget.session_finished.connect(c)
        widget.start()
        run_ticks(widget.engine, 8)
        widget.stop()

        assert recorder.last.elapsed_seconds == 8
        assert c.last == (8, False)
        assert widget.engine.phase == TimerPhase.READY
        assert widget.time_text == "0:30"
        assert "Stopped" in widget.feedback_text

    def test_zero_second_stop_not_recorded(self, widget, recorder):
        widget.start()
        widget.stop()
        assert len(recorder) == 0

    def test_stop_when_ready_not_recorded(self, widget, recorder):
        c = SignalCollector()
        widget.session_finished.connect(c)
        widget.stop()
        assert len(recorder) == 0
        assert len(c) == 0

    def test_stop_after_completion_records_once(self, widget, recorder):
        c = SignalCollector()
        widget.session_finished.connect(c)
        widget.start()
        complete_countdown(widget.engine)
        widget.stop()
        assert [r.elapsed_seconds for r in recorder.records] == [30]
        assert c.items == [(30, True)]
        assert widget.engine.phase == TimerPhase.READY

    def test_skip_discards_without_recording(self, widget, recorder):
        widget.start()
        run_ticks(widget.engine, 10)
        widget.skip()
        assert len(recorder) == 0
        assert widget.engine.phase == TimerPhase.READY
        assert widget.engine.remaining == 30

    def test_recorder_failure_is_absorbed(self, qapp, audio):
        w = TimerWidget("side_plank", 3, audio=audio, recorder=FailingRecorder())
        w.start()
        complete_countdown(w.engine)
        assert w.engine.phase == TimerPhase.COMPLETED
        w.dispose()

    def test_muted_sound_still_completes(self, widget, audio, recorder):
        widget.start()
        audio.toggle_sound()
        complete_countdown(widget.engine)
        assert recorder.last.elapsed_seconds == 30


# ═══════════════════════════════════════════════════════════════════════
#  DURATION CHANGES
# ═══════════════════════════════════════════════════════════════════════


class TestDurationChanges:

    def test_new_duration_builds_new_engine(self, widget):
        old = widget.engine
        widget.set_duration(90)
        assert widget.engine is not old
        assert widget.engine.target_duration == 90
        assert widget.time_text == "1:30"

    def test_old_engine_released(self, widget):
        widget.start()
        old = widget.engine
        handle = old._interval
        widget.set_duration(60)
        assert handle.cancelled
        assert not old.has_active_interval
        assert widget.engine.phase == TimerPhase.READY

    def test_switch_mid_session_is_not_recorded(self, widget, recorder):
        widget.start()
        run_ticks(widget.engine, 4)
        widget.set_duration(60)
        assert len(recorder) == 0

    def test_invalid_duration_rejected(self, widget):
        old = widget.engine
        with pytest.raises(InvalidDurationError):
            widget.set_duration(0)
        assert widget.engine is old

    def test_presets_disabled_during_session(self, widget):
        widget.start()
        assert not any(b.isEnabled() for b in widget._preset_btns)
        widget.stop()
        assert all(b.isEnabled() for b in widget._preset_btns)


# ═══════════════════════════════════════════════════════════════════════
#  BREATHING + COACHING WIRING
# ═══════════════════════════════════════════════════════════════════════


class TestSideEffects:

    def test_breathing_follows_running(self, widget):
        assert not widget.rhythm.active
        widget.start()
        assert widget.rhythm.active
        widget.pause()
        assert not widget.rhythm.active
        assert not widget.rhythm.has_active_interval

    def test_breathing_stops_on_completion(self, widget):
        widget.start()
        complete_countdown(widget.engine)
        assert not widget.rhythm.has_active_interval

    def test_breathing_phase_survives_pause(self, widget):
        widget.start()
        widget.rhythm._on_toggle()
        widget.pause()
        widget.resume()
        assert widget.rhythm.display_phase == BreathingPhase.EXHALE

    def test_breathing_does_not_touch_countdown(self, widget):
        widget.start()
        run_ticks(widget.engine, 3)
        widget.set_breathing_enabled(False)
        widget.set_breathing_enabled(True)
        assert widget.engine.remaining == 27
        assert widget.engine.has_active_interval

    def test_coaching_shown_only_while_running(self, widget):
        assert widget.coaching_text is None
        widget.start()
        assert widget.coaching_text == COACHING_CUES["start"]
        widget.pause()
        assert widget.coaching_text is None
        widget.resume()
        assert widget.coaching_text == COACHING_CUES["resume"]

    def test_final_stretch_cue(self, widget):
        widget.start()
        run_ticks(widget.engine, 20)
        assert widget.coaching_text == COACHING_CUES["final_stretch"]

    def test_coaching_gated_by_feature(self, qapp, audio):
        flags = FeatureFlags({AI_COACHING: False})
        w = TimerWidget("plank", 30, audio=audio, features=flags)
        w.start()
        assert w.coaching_text is None
        flags.set_enabled(AI_COACHING, True)
        w.refresh_features()
        assert w.coaching_text == COACHING_CUES["start"]
        w.dispose()

    def test_tip_only_when_ready(self, widget):
        assert widget.tip_text in TIP_MESSAGES
        widget.start()
        assert widget.tip_text is None

    @pytest.mark.parametrize("enabled", [True, False])
    def test_tip_follows_feature_flag(self, qapp, audio, enabled):
        flags = FeatureFlags({TIMER_TIPS: enabled})
        w = TimerWidget("plank", 30, audio=audio, features=flags)
        if enabled:
            assert w.tip_text in TIP_MESSAGES
        else:
            assert w.tip_text is None
        w.dispose()

    def test_tip_appears_when_flag_turned_on(self, qapp, audio):
        flags = FeatureFlags({TIMER_TIPS: False})
        w = TimerWidget("plank", 30, audio=audio, features=flags)
        flags.set_enabled(TIMER_TIPS, True)
        w.refresh_features()
        assert w.tip_text in TIP_MESSAGES
        w.dispose()

    def test_dispose_releases_everything(self, widget):
        widget.start()
        engine_handle = widget.engine._interval
        breath_handle = widget.rhythm._interval
        widget.dispose()
        assert engine_handle.cancelled
        assert breath_handle.cancelled


# ═══════════════════════════════════════════════════════════════════════
#  MAIN WINDOW
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestMainWindow:
    def _make_app(self, recorder, **overrides):
        from plankit.app import PlankItApp
        return PlankItApp(Settings(**overrides), recorder=recorder)

    def test_uses_default_duration(self, recorder):
        app = self._make_app(recorder, default_duration=45)
        assert app._timer_widget.engine.target_duration == 45
        app._timer_widget.dispose()

    def test_starts_with_bad_duration_on_disk(self, recorder, tmp_path):
        from plankit.app import PlankItApp
        (tmp_path / "settings.json").write_text('{"default_duration": 0}', encoding="utf-8")
        app = PlankItApp(recorder=recorder)
        assert app._timer_widget.engine.target_duration == 60
        app._timer_widget.dispose()

    def test_space_starts_and_pauses(self, recorder):
        app = self._make_app(recorder)
        app._on_space()
        assert app._timer_widget.engine.phase == TimerPhase.RUNNING
        app._on_space()
        assert app._timer_widget.engine.phase == TimerPhase.PAUSED
        app._timer_widget.dispose()

    def test_escape_stops_and_records(self, recorder):
        app = self._make_app(recorder)
        app._on_space()
        run_ticks(app._timer_widget.engine, 6)
        app._on_escape()
        assert recorder.last.elapsed_seconds == 6
        app._timer_widget.dispose()

    def test_escape_noop_when_ready(self, recorder):
        app = self._make_app(recorder)
        app._on_escape()
        assert len(recorder) == 0
        app._timer_widget.dispose()

    def test_sound_toggle_persisted(self, recorder):
        from plankit.settings import load_settings
        app = self._make_app(recorder)
        app._audio.toggle_sound()
        assert load_settings().sound_enabled is False
        app._timer_widget.dispose()

    def test_apply_settings(self, recorder):
        app = self._make_app(recorder)
        app._settings.default_duration = 120
        app._settings.breathing_guidance = True
        app._settings.sound_enabled = False
        app._apply_settings()
        assert app._timer_widget.engine.target_duration == 120
        assert app._timer_widget.rhythm.enabled
        assert app._audio.sound_enabled is False
        app._timer_widget.dispose()
