# util/types.py
from typing import List, Optional, TypedDict


# Flow: Shape of the raw status document as sent by FTSnext.
class RawProcessStatus(TypedDict, total=False):
    processId: str
    phase: str
    createdAt: Optional[List[int]]
    finishedAt: Optional[List[int]]
    totalPatients: int
    totalBundles: int
    deidentifiedBundles: int
    sentBundles: int
    skippedBundles: int
