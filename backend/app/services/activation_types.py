from enum import Enum
from typing import Optional, Union

from app.exceptions import UnknownProgramError


class ActivationCode(str, Enum):
    SOTA = "sota"
    POTA = "pota"
    WWFF = "wwff"
    GMA = "gma"
    WCA = "wca"
    ZLOTA = "zlota"
    # IOTA has no activation type in the logger yet


# One row per program: (activation tag for our own ref, hunting tag for theirs)
_TAGS = {
    ActivationCode.SOTA: ("sotaActivation", "sota"),
    ActivationCode.POTA: ("potaActivation", "pota"),
    ActivationCode.WWFF: ("wwffActivation", "wwff"),
    ActivationCode.GMA: ("gmaActivation", "gma"),
    ActivationCode.WCA: ("wcaActivation", "wca"),
    ActivationCode.ZLOTA: ("zlotaActivation", "zlota"),
}

SUPPORTED_CODES = tuple(code.value for code in ActivationCode)


def _lookup(code: Union[str, ActivationCode, None]) -> Optional[ActivationCode]:
    if isinstance(code, ActivationCode):
        return code
    if not isinstance(code, str):
        return None
    try:
        return ActivationCode(code.lower())
    except ValueError:
        return None


def normalize(value: str) -> ActivationCode:
    if not value:
        raise UnknownProgramError("activation program required")
    code = _lookup(value)
    if code is None:
        raise UnknownProgramError(f"unknown activation program: {value}")
    return code


def activation_tag_for(code: Union[str, ActivationCode, None]) -> Optional[str]:
    """Operation ref type used when *we* are activating ``code``."""
    found = _lookup(code)
    return _TAGS[found][0] if found is not None else None


def hunting_tag_for(code: Union[str, ActivationCode, None]) -> Optional[str]:
    """QSO ref type used when the other station is activating ``code``."""
    found = _lookup(code)
    return _TAGS[found][1] if found is not None else None


def is_supported(code: Union[str, ActivationCode, None]) -> bool:
    return _lookup(code) is not None
