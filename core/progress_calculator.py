# core/progress_calculator.py
from model.process_status import ProcessStatus
from util.constants import COMPLETED_PHASE


def fraction(status: ProcessStatus, previous: float) -> float:
    """
    Share of deidentified bundles that were sent or skipped.
    Indeterminate (no deidentified bundles yet) keeps `previous`.
    Not clamped: an overshoot stays visible to callers.
    """
    if status.deidentifiedBundles == 0:
        return previous
    return (status.sentBundles + status.skippedBundles) / status.deidentifiedBundles


def is_complete(status: ProcessStatus, value: float) -> bool:
    # Both must hold; counters may lag the phase flip and vice versa.
    return status.phase == COMPLETED_PHASE and value == 1.0
