# core/poll_loop.py
import logging
import queue
import time
from dataclasses import replace
from typing import Callable, Iterator
from core import progress_calculator
from core.progress_renderer import ProgressRenderer, Screen
from model.process_status import JobHandle, ProcessStatus
from model.progress import (
    AdvanceFrame,
    Effect,
    Event,
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
from util.errors import AppError

logger = logging.getLogger(__name__)

Fetcher = Callable[[JobHandle], ProcessStatus]


def transition(
    state: ProgressState, event: Event, interval: float = 1.0
) -> tuple[ProgressState, list[Effect]]:
    """
    One step of the monitor: (state, event) -> (state, effects).
    Pure; the driver performs the effects.
    """
    if state.terminal:
        return state, []

    if isinstance(event, KeyPress):
        return replace(state, phase=LoopPhase.CANCELLED), [Quit()]

    if isinstance(event, Resize):
        return state, [ResizeRenderer(event.width)]

    if isinstance(event, FrameAdvance):
        return state, [AdvanceFrame()]

    if isinstance(event, Tick):
        return replace(state, phase=LoopPhase.POLLING), [FetchStatus(state.handle)]

    if isinstance(event, PollFailed):
        return replace(state, phase=LoopPhase.FAILED), [Fail(event.error)]

    if isinstance(event, StatusReceived):
        status = event.status
        value = progress_calculator.fraction(status, state.fraction)
        effects: list[Effect] = []
        if status.deidentifiedBundles > 0:
            effects.append(SetPercent(value))
        nxt = replace(state, fraction=value, status=status)
        if progress_calculator.is_complete(status, value):
            return replace(nxt, phase=LoopPhase.COMPLETE), effects + [Quit()]
        return nxt, effects + [ScheduleTick(interval)]

    return state, []


class PollLoop:
    """
    Cooperative driver around `transition`.

    Events are handled strictly one at a time in arrival order. Ticks and
    animation frames come from deadlines; key presses and resizes are
    posted from outside via `post`. The status fetch runs synchronously
    and its outcome is queued behind anything posted while it ran.
    """

    def __init__(
        self,
        handle: JobHandle,
        fetch: Fetcher,
        renderer: ProgressRenderer,
        screen: Screen | None = None,
        interval: float = 1.0,
        frame_interval: float = 1 / 30,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.state = ProgressState(handle=handle)
        self._fetch = fetch
        self._renderer = renderer
        self._screen = screen
        self._interval = interval
        self._frame_interval = frame_interval
        self._clock = clock
        self._events: "queue.SimpleQueue[Event]" = queue.SimpleQueue()
        self._next_tick: float | None = None
        self._next_frame: float | None = None
        self._frames: Iterator[str] | None = None
        self.polls = 0

    def post(self, event: Event) -> None:
        # SimpleQueue.put is reentrant, so threads and signal handlers may call this
        self._events.put(event)

    def run(self) -> ProgressState:
        """
        Block until the loop reaches a terminal phase and return the final
        state. A failed poll raises its AppError.
        """
        logger.info("poll.start url=%s interval=%.2fs", self.state.handle, self._interval)
        self._draw(self._renderer.view())
        self._perform(ScheduleTick(self._interval))
        try:
            while not self.state.terminal:
                try:
                    self.dispatch(self._next_event())
                except KeyboardInterrupt:
                    self.dispatch(KeyPress("ctrl+c"))
        finally:
            if self._screen is not None:
                self._screen.close()
        logger.info(
            "poll.stop phase=%s fraction=%.3f polls=%d",
            self.state.phase.value,
            self.state.fraction,
            self.polls,
        )
        return self.state

    def dispatch(self, event: Event) -> None:
        self.state, effects = transition(self.state, event, self._interval)
        for effect in effects:
            self._perform(effect)

    # ---------------- Event sources ----------------

    def _next_event(self) -> Event:
        while True:
            deadlines = [d for d in (self._next_tick, self._next_frame) if d is not None]
            timeout = None
            if deadlines:
                timeout = max(0.0, min(deadlines) - self._clock())
            try:
                return self._events.get(timeout=timeout)
            except queue.Empty:
                pass

            now = self._clock()
            if self._next_frame is not None and now >= self._next_frame:
                self._next_frame = None
                return FrameAdvance()
            if self._next_tick is not None and now >= self._next_tick:
                self._next_tick = None
                return Tick(now)

    # ---------------- Effects ----------------

    def _perform(self, effect: Effect) -> None:
        if isinstance(effect, FetchStatus):
            self._poll(effect.handle)
        elif isinstance(effect, ScheduleTick):
            self._next_tick = self._clock() + effect.delay
        elif isinstance(effect, SetPercent):
            self._frames = self._renderer.set_percent(effect.fraction)
            self._next_frame = self._clock()
        elif isinstance(effect, AdvanceFrame):
            self._advance_frame()
        elif isinstance(effect, ResizeRenderer):
            self._renderer.resize(effect.width)
            self._draw(self._renderer.view())
        elif isinstance(effect, Quit):
            self._next_tick = self._next_frame = None
            self._frames = None
            self._draw(self._renderer.finish())
        elif isinstance(effect, Fail):
            self._next_tick = self._next_frame = None
            raise effect.error

    def _poll(self, handle: JobHandle) -> None:
        self.polls += 1
        try:
            status = self._fetch(handle)
        except AppError as e:
            self.post(PollFailed(e))
            return
        logger.debug(
            "poll.status id=%s phase=%s sent=%d skipped=%d deidentified=%d",
            status.processId,
            status.phase,
            status.sentBundles,
            status.skippedBundles,
            status.deidentifiedBundles,
        )
        self.post(StatusReceived(status))

    def _advance_frame(self) -> None:
        if self._frames is None:
            return
        frame = next(self._frames, None)
        if frame is None:
            self._frames = None
            return
        self._draw(frame)
        self._next_frame = self._clock() + self._frame_interval

    def _draw(self, view: str) -> None:
        if self._screen is not None:
            self._screen.draw(view)
