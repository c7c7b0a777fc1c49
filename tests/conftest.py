from __future__ import annotations

import pytest

from gridcalc.sheet import Spreadsheet


@pytest.fixture(autouse=True)
def _detach_event_sink():
    """Keep a sink configured by one test from leaking into the next."""
    import gridcalc.logging.events as mod

    old_sink = mod._sink
    mod._sink = None
    try:
        yield
    finally:
        mod._sink = old_sink


@pytest.fixture
def sheet() -> Spreadsheet:
    return Spreadsheet(10, 10)
