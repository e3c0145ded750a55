"""pytest configuration and shared fixtures."""

import time

import pytest

from param_coerce import build_default_coercer


@pytest.fixture
def coercer():
    """Default coercer (en_US)."""
    return build_default_coercer()


@pytest.fixture
def form_inputs():
    """Raw values as they arrive from an untyped form submission."""
    return {
        "limit": "42",
        "threshold": "1,234.50",
        "regions": ["north", "south"],
        "start": "2024-07-20",
        "created": "2024-07-20T10:15:00.000",
        "active": "true",
        "comment": "",
    }


@pytest.fixture
def host_tz(monkeypatch):
    """Switch the process timezone; restored after the test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def _set(name):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()
