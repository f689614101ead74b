"""Shared fixtures."""

from __future__ import annotations

import pytest

from postfixcsv import logging as events


@pytest.fixture(autouse=True)
def _no_event_sink():
    """Keep the module-level event sink from leaking between tests."""
    events.configure(None)
    yield
    events.configure(None)
