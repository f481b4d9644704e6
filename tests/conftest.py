"""Pytest configuration to make the project root importable.

The project keeps its packages (``config``, ``core``, ``model``, ...) at the
repository root, so tests need the root on ``sys.path`` when run from
anywhere else.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from model.process_status import ProcessStatus  # noqa: E402


@pytest.fixture
def make_status():
    """Build a ProcessStatus with sensible defaults for the fields a test ignores."""

    def _make(
        phase: str = "RUNNING",
        sent: int = 0,
        skipped: int = 0,
        deidentified: int = 0,
        **extra,
    ) -> ProcessStatus:
        return ProcessStatus(
            processId=extra.pop("processId", "proc-1"),
            phase=phase,
            totalPatients=extra.pop("totalPatients", 10),
            totalBundles=extra.pop("totalBundles", deidentified),
            deidentifiedBundles=deidentified,
            sentBundles=sent,
            skippedBundles=skipped,
            **extra,
        )

    return _make
