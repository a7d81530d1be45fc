import os
import sys
import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


REFERENCE_SERIES = [
    22.5, 24.3, 23.8, 25.7, 22.1, 26.4, 24.9, 23.2, 95.8, 25.5,
    24.1, 22.8, 26.7, 23.5, 25.2, 24.8, 108.3, 23.9, 25.6, 22.4,
]

FIXED_NOW_MS = 1_700_000_000_000


@pytest.fixture
def reference_series():
    return list(REFERENCE_SERIES)


@pytest.fixture
def fixed_now():
    return FIXED_NOW_MS


@pytest.fixture
def no_debounce(monkeypatch):
    from config import settings

    monkeypatch.setattr(settings, "debounce_seconds", 0.0)
    return settings
