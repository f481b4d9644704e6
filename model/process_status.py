# model/process_status.py
from datetime import datetime
from typing import Annotated
from pydantic import BaseModel, ConfigDict, Field, StrictStr

Counter = Annotated[int, Field(ge=0, strict=True)]


class ProcessStatus(BaseModel):
    """
    Snapshot of a transfer process as reported by the status endpoint.
    Replaced wholesale on every poll, never merged.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    processId: StrictStr
    phase: StrictStr
    createdAt: datetime | None = None
    finishedAt: datetime | None = None
    totalPatients: Counter
    totalBundles: Counter
    deidentifiedBundles: Counter
    sentBundles: Counter
    skippedBundles: Counter


class JobHandle(BaseModel):
    model_config = ConfigDict(frozen=True)

    statusUrl: str = ""

    @property
    def available(self) -> bool:
        return bool(self.statusUrl.strip())

    def __str__(self) -> str:
        return self.statusUrl
