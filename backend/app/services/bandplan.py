"""Default frequency lookups used to derive band and mode for suggested QSOs.

Frequencies are integer Hz, matching the ``freq`` deep-link parameter.
Callers with a full band plan should inject their own lookups instead.
"""

from typing import Optional

# Minimal HF/VHF coverage; extend as needed. Edges are inclusive.
_BANDS = [
    (1_800_000, 2_000_000, "160m"),
    (3_500_000, 4_000_000, "80m"),
    (5_330_500, 5_406_500, "60m"),
    (7_000_000, 7_300_000, "40m"),
    (10_100_000, 10_150_000, "30m"),
    (14_000_000, 14_350_000, "20m"),
    (18_068_000, 18_168_000, "17m"),
    (21_000_000, 21_450_000, "15m"),
    (24_890_000, 24_990_000, "12m"),
    (28_000_000, 29_700_000, "10m"),
    (50_000_000, 54_000_000, "6m"),
    (144_000_000, 148_000_000, "2m"),
    (420_000_000, 450_000_000, "70cm"),
]

# Conventional mode segments; lower edge inclusive, upper edge exclusive
_MODE_SEGMENTS = [
    (1_800_000, 1_840_000, "CW"),
    (1_840_000, 2_000_001, "SSB"),
    (3_500_000, 3_570_000, "CW"),
    (3_570_000, 3_600_000, "DATA"),
    (3_600_000, 4_000_001, "SSB"),
    (5_330_500, 5_406_501, "SSB"),
    (7_000_000, 7_040_000, "CW"),
    (7_040_000, 7_100_000, "DATA"),
    (7_100_000, 7_300_001, "SSB"),
    (10_100_000, 10_130_000, "CW"),
    (10_130_000, 10_150_001, "DATA"),
    (14_000_000, 14_070_000, "CW"),
    (14_070_000, 14_100_000, "DATA"),
    (14_100_000, 14_350_001, "SSB"),
    (18_068_000, 18_100_000, "CW"),
    (18_100_000, 18_110_000, "DATA"),
    (18_110_000, 18_168_001, "SSB"),
    (21_000_000, 21_070_000, "CW"),
    (21_070_000, 21_150_000, "DATA"),
    (21_150_000, 21_450_001, "SSB"),
    (24_890_000, 24_915_000, "CW"),
    (24_915_000, 24_930_000, "DATA"),
    (24_930_000, 24_990_001, "SSB"),
    (28_000_000, 28_070_000, "CW"),
    (28_070_000, 28_300_000, "DATA"),
    (28_300_000, 29_000_000, "SSB"),
    (29_000_000, 29_700_001, "FM"),
    (50_000_000, 50_100_000, "CW"),
    (50_100_000, 50_300_000, "SSB"),
    (50_300_000, 51_000_000, "DATA"),
    (51_000_000, 54_000_001, "FM"),
    (144_000_000, 144_100_000, "CW"),
    (144_100_000, 144_300_000, "SSB"),
    (144_300_000, 148_000_001, "FM"),
    (420_000_000, 450_000_001, "FM"),
]


def band_for_frequency(hz: int) -> Optional[str]:
    for lo, hi, name in _BANDS:
        if lo <= hz <= hi:
            return name
    return None


def mode_for_frequency(hz: int) -> Optional[str]:
    for lo, hi, mode in _MODE_SEGMENTS:
        if lo <= hz < hi:
            return mode
    return None
