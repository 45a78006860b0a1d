# Ensure the backend directory is on sys.path so tests can import the `app` package
import sys
from pathlib import Path

import pytest

# tests/ -> app/ -> backend/
BACKEND_DIR = Path(__file__).resolve().parent.parent.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

SCHEME = "com.ham2k.polo://"


def fake_band(hz):
    if 14_000_000 <= hz < 14_350_000:
        return "20m"
    if 7_000_000 <= hz < 7_300_000:
        return "40m"
    if 21_000_000 <= hz < 21_450_000:
        return "15m"
    return None


def fake_mode(hz):
    # Simplified: CW below 14.100, SSB above
    if 14_000_000 <= hz < 14_100_000:
        return "CW"
    if 7_000_000 <= hz < 7_050_000:
        return "CW"
    return "SSB"


@pytest.fixture
def lookups():
    return {"band_lookup": fake_band, "mode_lookup": fake_mode}


@pytest.fixture
def fixed_clock():
    return lambda: 1704067200000
