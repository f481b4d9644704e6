"""Tests for the polling state machine and its driver."""

from __future__ import annotations

import io

import pytest

from core.poll_loop import PollLoop, transition
from core.progress_renderer import ProgressRenderer, RenderStyle, Screen
from model.process_status import JobHandle
from model.progress import (
    AdvanceFrame,
    Fail,
    FetchStatus,
    FrameAdvance,
    KeyPress,
    LoopPhase,
    PollFailed,
    ProgressState,
    Quit,
    Resize,
    ResizeRenderer,
    ScheduleTick,
    SetPercent,
    StatusReceived,
    Tick,
)
from util.errors import DecodeError, TransportError

HANDLE = JobHandle(statusUrl="http://fts.local/api/v2/process/status/1")


def _polling(fraction: float = 0.0) -> ProgressState:
    return ProgressState(handle=HANDLE, phase=LoopPhase.POLLING, fraction=fraction)


class TestTransition:
    def test_first_tick_starts_polling(self):
        state, effects = transition(ProgressState(handle=HANDLE), Tick())

        assert state.phase == LoopPhase.POLLING
        assert effects == [FetchStatus(HANDLE)]

    def test_tick_while_polling_fetches(self):
        state, effects = transition(_polling(), Tick())
        assert state.phase == LoopPhase.POLLING
        assert effects == [FetchStatus(HANDLE)]

    def test_status_publishes_fraction_and_schedules_next_tick(self, make_status):
        status = make_status(sent=3, skipped=1, deidentified=8)

        state, effects = transition(_polling(), StatusReceived(status), interval=2.5)

        assert state.phase == LoopPhase.POLLING
        assert state.fraction == 0.5
        assert state.status is status
        assert effects == [SetPercent(0.5), ScheduleTick(2.5)]

    def test_indeterminate_status_only_schedules(self, make_status):
        state, effects = transition(_polling(0.3), StatusReceived(make_status()))

        assert state.fraction == 0.3
        assert effects == [ScheduleTick(1.0)]

    def test_completion_stops_ticking(self, make_status):
        status = make_status(phase="COMPLETED", sent=8, skipped=2, deidentified=10)

        state, effects = transition(_polling(0.9), StatusReceived(status))

        assert state.phase == LoopPhase.COMPLETE
        assert state.fraction == 1.0
        assert effects == [SetPercent(1.0), Quit()]

    def test_completed_phase_with_partial_fraction_keeps_polling(self, make_status):
        status = make_status(phase="COMPLETED", sent=5, deidentified=10)

        state, effects = transition(_polling(), StatusReceived(status))

        assert state.phase == LoopPhase.POLLING
        assert ScheduleTick(1.0) in effects

    def test_completed_phase_with_previous_full_fraction(self, make_status):
        status = make_status(phase="COMPLETED", deidentified=0)

        state, effects = transition(_polling(1.0), StatusReceived(status))

        assert state.phase == LoopPhase.COMPLETE
        assert effects == [Quit()]

    @pytest.mark.parametrize(
        "phase", [LoopPhase.AWAITING_FIRST_TICK, LoopPhase.POLLING]
    )
    def test_key_press_cancels(self, phase):
        state = ProgressState(handle=HANDLE, phase=phase)

        state, effects = transition(state, KeyPress("q"))

        assert state.phase == LoopPhase.CANCELLED
        assert effects == [Quit()]

    def test_resize_changes_layout_only(self):
        before = _polling(0.4)
        state, effects = transition(before, Resize(120, 40))

        assert state == before
        assert effects == [ResizeRenderer(120)]

    def test_frame_advance_changes_nothing(self):
        before = _polling(0.4)
        state, effects = transition(before, FrameAdvance())

        assert state == before
        assert effects == [AdvanceFrame()]

    def test_poll_failure_is_terminal(self):
        err = TransportError("connection refused")

        state, effects = transition(_polling(), PollFailed(err))

        assert state.phase == LoopPhase.FAILED
        assert effects == [Fail(err)]

    @pytest.mark.parametrize(
        "phase", [LoopPhase.COMPLETE, LoopPhase.CANCELLED, LoopPhase.FAILED]
    )
    def test_terminal_phases_ignore_events(self, phase, make_status):
        state = ProgressState(handle=HANDLE, phase=phase, fraction=0.7)
        for event in (Tick(), KeyPress("x"), Resize(80), StatusReceived(make_status())):
            after, effects = transition(state, event)
            assert after == state
            assert effects == []


class _ScriptedFetch:
    """Return the scripted statuses in order, repeating the last one."""

    def __init__(self, *outcomes, on_fetch=None):
        self.outcomes = list(outcomes)
        self.calls = 0
        self.on_fetch = on_fetch

    def __call__(self, handle):
        assert handle == HANDLE
        self.calls += 1
        if self.on_fetch is not None:
            self.on_fetch(self.calls)
        outcome = self.outcomes[min(self.calls, len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _loop(fetch, out: io.StringIO | None = None) -> PollLoop:
    renderer = ProgressRenderer(RenderStyle(color=False, frames=2))
    screen = Screen(out if out is not None else io.StringIO(), ansi=False)
    return PollLoop(HANDLE, fetch, renderer, screen, interval=0.0, frame_interval=0.0)


class TestPollLoop:
    def test_runs_until_complete(self, make_status):
        fetch = _ScriptedFetch(
            make_status(deidentified=0),
            make_status(sent=2, deidentified=10),
            make_status(sent=6, skipped=1, deidentified=10),
            make_status(phase="COMPLETED", sent=9, skipped=1, deidentified=10),
        )
        out = io.StringIO()

        state = _loop(fetch, out).run()

        assert state.phase == LoopPhase.COMPLETE
        assert state.fraction == 1.0
        assert fetch.calls == 4
        assert "100%" in out.getvalue()
        assert "Press any key to quit" in out.getvalue()

    def test_numeric_completion_without_phase_keeps_polling(self, make_status):
        fetch = _ScriptedFetch(
            make_status(sent=10, deidentified=10),
            make_status(sent=10, deidentified=10),
            make_status(phase="COMPLETED", sent=10, deidentified=10),
        )

        state = _loop(fetch).run()

        assert state.phase == LoopPhase.COMPLETE
        assert fetch.calls == 3

    def test_key_during_fetch_cancels_after_fetch_resolves(self, make_status):
        loop = None

        def press_key(call):
            loop.post(KeyPress("q"))

        fetch = _ScriptedFetch(make_status(sent=1, deidentified=10), on_fetch=press_key)
        loop = _loop(fetch)

        state = loop.run()

        assert state.phase == LoopPhase.CANCELLED
        assert fetch.calls == 1
        # The in-flight result arrived after the key and was dropped
        assert state.status is None
        assert loop._next_tick is None

    def test_key_before_first_tick_cancels_without_fetching(self, make_status):
        fetch = _ScriptedFetch(make_status())
        loop = _loop(fetch)
        loop.post(KeyPress(" "))

        state = loop.run()

        assert state.phase == LoopPhase.CANCELLED
        assert fetch.calls == 0

    def test_ctrl_c_counts_as_key_press(self, make_status):
        fetch = _ScriptedFetch(make_status(), KeyboardInterrupt())

        state = _loop(fetch).run()

        assert state.phase == LoopPhase.CANCELLED
        assert fetch.calls == 2

    @pytest.mark.parametrize(
        "error", [TransportError("connection reset"), DecodeError("not json")]
    )
    def test_poll_error_is_raised(self, make_status, error):
        fetch = _ScriptedFetch(make_status(sent=1, deidentified=4), error)
        loop = _loop(fetch)

        with pytest.raises(type(error)) as exc:
            loop.run()

        assert exc.value is error
        assert loop.state.phase == LoopPhase.FAILED
        assert loop.state.fraction == 0.25
        assert fetch.calls == 2

    def test_resize_updates_renderer_width(self, make_status):
        fetch = _ScriptedFetch(make_status(phase="COMPLETED", sent=1, deidentified=1))
        renderer = ProgressRenderer(RenderStyle(color=False, frames=1))
        loop = PollLoop(HANDLE, fetch, renderer, interval=0.0, frame_interval=0.0)
        loop.post(Resize(40, 20))

        state = loop.run()

        assert state.phase == LoopPhase.COMPLETE
        assert renderer.width == 32
