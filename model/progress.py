# model/progress.py
from dataclasses import dataclass
from enum import Enum
from typing import Union
from model.process_status import JobHandle, ProcessStatus
from util.errors import AppError


class LoopPhase(str, Enum):
    AWAITING_FIRST_TICK = "awaiting_first_tick"
    POLLING = "polling"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (LoopPhase.COMPLETE, LoopPhase.CANCELLED, LoopPhase.FAILED)


@dataclass
class ProgressState:
    handle: JobHandle
    phase: LoopPhase = LoopPhase.AWAITING_FIRST_TICK
    fraction: float = 0.0
    status: ProcessStatus | None = None

    @property
    def terminal(self) -> bool:
        return self.phase.terminal


# ---------------- Events ----------------


@dataclass(frozen=True)
class Tick:
    at: float = 0.0


@dataclass(frozen=True)
class KeyPress:
    key: str = ""


@dataclass(frozen=True)
class Resize:
    width: int
    height: int = 0


@dataclass(frozen=True)
class FrameAdvance:
    pass


@dataclass(frozen=True)
class StatusReceived:
    status: ProcessStatus


@dataclass(frozen=True)
class PollFailed:
    error: AppError


Event = Union[Tick, KeyPress, Resize, FrameAdvance, StatusReceived, PollFailed]


# ---------------- Effects ----------------


@dataclass(frozen=True)
class FetchStatus:
    handle: JobHandle


@dataclass(frozen=True)
class ScheduleTick:
    delay: float


@dataclass(frozen=True)
class SetPercent:
    fraction: float


@dataclass(frozen=True)
class AdvanceFrame:
    pass


@dataclass(frozen=True)
class ResizeRenderer:
    width: int


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Fail:
    error: AppError


Effect = Union[
    FetchStatus, ScheduleTick, SetPercent, AdvanceFrame, ResizeRenderer, Quit, Fail
]
