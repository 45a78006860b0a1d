"""Parsing of ``com.ham2k.polo://qso?...`` deep links and QSO suggestions.

Companion apps (spotting tools, SOTA/POTA clients) open the logger with a
link such as::

    com.ham2k.polo://qso?theirCall=K6TEST&theirRef=W6/CT-006&theirSig=sota&freq=14285000&mode=CW

Recognized query keys:

    myRef, mySig       our activation reference and program
    theirRef, theirSig the other station's reference and program
    myCall, theirCall  callsigns
    freq               frequency in Hz
    mode               operating mode (CW, SSB, ...)
    time               start time in epoch milliseconds

At least one complete ref pair (myRef+mySig or theirRef+theirSig) is
required. Unknown keys are ignored. When a key repeats, the first value wins.
"""

from __future__ import annotations

import logging
import re
import threading
import time as _time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qsl

from app.exceptions import (
    DeepLinkError,
    IncompletePairError,
    MalformedLinkError,
    NoRefPairError,
    NotOurSchemeError,
    UnknownProgramError,
)
from app.services.activation_types import (
    ActivationCode,
    hunting_tag_for,
    is_supported,
    normalize,
)
from app.services.bandplan import band_for_frequency, mode_for_frequency

logger = logging.getLogger(__name__)

URL_SCHEME = "com.ham2k.polo://"
SUGGESTION_KEY_PREFIX = "deeplink-"

_FREQ_RE = re.compile(r"[0-9]+")
_TIME_RE = re.compile(r"[+-]?[0-9]+")

BandLookup = Callable[[int], Optional[str]]
ModeLookup = Callable[[int], Optional[str]]
Clock = Callable[[], int]


@dataclass(frozen=True)
class ActivationRef:
    ref: str  # case preserved, e.g. W6/CT-006
    program: ActivationCode


@dataclass(frozen=True)
class LinkParams:
    my_ref: Optional[ActivationRef] = None
    their_ref: Optional[ActivationRef] = None
    freq: Optional[int] = None  # Hz
    mode: Optional[str] = None
    time: Optional[int] = None  # epoch milliseconds
    my_call: Optional[str] = None
    their_call: Optional[str] = None

    def __post_init__(self) -> None:
        if self.my_ref is None and self.their_ref is None:
            raise ValueError("LinkParams needs my_ref or their_ref")

    @property
    def my_sig(self) -> Optional[str]:
        return self.my_ref.program.value if self.my_ref else None

    @property
    def their_sig(self) -> Optional[str]:
        return self.their_ref.program.value if self.their_ref else None

    def to_dict(self) -> Dict[str, Any]:
        """Flat view using the link's own key names; ``None`` means not provided."""
        return {
            "myRef": self.my_ref.ref if self.my_ref else None,
            "mySig": self.my_sig,
            "theirRef": self.their_ref.ref if self.their_ref else None,
            "theirSig": self.their_sig,
            "freq": self.freq,
            "mode": self.mode,
            "time": self.time,
            "myCall": self.my_call,
            "theirCall": self.their_call,
        }


@dataclass(frozen=True)
class QSORef:
    type: str
    ref: str


@dataclass
class PartyInfo:
    call: Optional[str] = None


@dataclass
class SuggestedQSO:
    suggestion_key: str
    their: PartyInfo = field(default_factory=PartyInfo)
    our: PartyInfo = field(default_factory=PartyInfo)
    freq: Optional[int] = None
    band: Optional[str] = None
    mode: Optional[str] = None
    start_at_millis: Optional[int] = None
    refs: Optional[List[QSORef]] = None

    def to_dict(self) -> Dict[str, Any]:
        def party(p: PartyInfo) -> Dict[str, str]:
            return {"call": p.call} if p.call else {}

        out: Dict[str, Any] = {
            "suggestion_key": self.suggestion_key,
            "their": party(self.their),
            "our": party(self.our),
        }
        for name in ("freq", "band", "mode", "start_at_millis"):
            val = getattr(self, name)
            if val is not None:
                out[name] = val
        if self.refs is not None:
            out["refs"] = [{"type": r.type, "ref": r.ref} for r in self.refs]
        return out


_last_millis = 0
_millis_lock = threading.Lock()


def now_millis() -> int:
    """Epoch milliseconds, strictly increasing within the process.

    Two calls in the same millisecond get consecutive values, so back-to-back
    suggestions never share a key.
    """
    global _last_millis
    with _millis_lock:
        _last_millis = max(_time.time_ns() // 1_000_000, _last_millis + 1)
        return _last_millis


def _first_values(query: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    pairs = parse_qsl(query, keep_blank_values=True, errors="strict")
    for key, val in pairs:
        # first occurrence wins, as URLSearchParams.get does
        values.setdefault(key, val)
    return values


def _parse_freq(raw: Optional[str]) -> Optional[int]:
    if not raw or not _FREQ_RE.fullmatch(raw):
        return None
    try:
        hz = int(raw)
    except ValueError:
        # past the interpreter's int-string digit limit
        return None
    return hz if hz > 0 else None


def _parse_time(raw: Optional[str]) -> Optional[int]:
    if not raw or not _TIME_RE.fullmatch(raw):
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _upper(raw: Optional[str]) -> Optional[str]:
    return raw.upper() if raw else None


def _check_sig(name: str, sig: Optional[str]) -> None:
    if sig and not is_supported(sig):
        raise UnknownProgramError(f"Unknown {name}: {sig}")


def parse_link_url_strict(url: str, scheme: str = URL_SCHEME) -> LinkParams:
    """Parse a deep link, raising a ``DeepLinkError`` subclass on failure."""
    if not isinstance(url, str) or not url.startswith(scheme):
        raise NotOurSchemeError(f"Not a {scheme} link")

    _path, sep, query = url[len(scheme):].partition("?")
    if not sep or not query:
        raise MalformedLinkError("Link has no query string")

    try:
        params = _first_values(query)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedLinkError(f"Could not decode query string: {e}") from e

    my_ref = params.get("myRef") or None
    my_sig = (params.get("mySig") or "").lower() or None
    their_ref = params.get("theirRef") or None
    their_sig = (params.get("theirSig") or "").lower() or None

    has_mine = bool(my_ref and my_sig)
    has_theirs = bool(their_ref and their_sig)
    if not has_mine and not has_theirs:
        if my_ref or my_sig or their_ref or their_sig:
            raise IncompletePairError("Ref pair is missing its ref or sig")
        raise NoRefPairError("No valid ref pair provided")

    _check_sig("mySig", my_sig)
    _check_sig("theirSig", their_sig)

    return LinkParams(
        my_ref=ActivationRef(my_ref, normalize(my_sig)) if has_mine else None,
        their_ref=ActivationRef(their_ref, normalize(their_sig)) if has_theirs else None,
        freq=_parse_freq(params.get("freq")),
        mode=_upper(params.get("mode")),
        time=_parse_time(params.get("time")),
        my_call=_upper(params.get("myCall")),
        their_call=_upper(params.get("theirCall")),
    )


def parse_link_url(url: str, scheme: str = URL_SCHEME) -> Optional[LinkParams]:
    """Parse a deep link, returning ``None`` when it is not a valid QSO link.

    Every failure (foreign scheme, missing query, incomplete or missing ref
    pair, unsupported program, decode error) is logged and reported as
    ``None``; nothing is raised to the caller.
    """
    try:
        return parse_link_url_strict(url, scheme)
    except NotOurSchemeError:
        logger.debug("[DeepLink] Ignoring URL with foreign scheme: %r", url)
        return None
    except DeepLinkError as e:
        logger.info("[DeepLink] %s", e)
        return None
    except Exception:
        logger.exception("[DeepLink] Error parsing URL: %r", url)
        return None


def build_suggested_qso(
    params: LinkParams,
    band_lookup: BandLookup = band_for_frequency,
    mode_lookup: ModeLookup = mode_for_frequency,
    clock: Clock = now_millis,
) -> SuggestedQSO:
    """Build the suggested QSO that pre-fills the logging form.

    ``suggestion_key`` is fresh on every call so the form can tell a new
    suggestion from a stale one. An explicit mode always beats the mode
    derived from the frequency. The other station's ref is recorded with
    its hunting type (``pota``), not the activation type (``potaActivation``).
    """
    qso = SuggestedQSO(suggestion_key=f"{SUGGESTION_KEY_PREFIX}{clock()}")

    if params.their_call:
        qso.their.call = params.their_call
    if params.my_call:
        qso.our.call = params.my_call

    if params.freq:
        qso.freq = params.freq
        qso.band = band_lookup(params.freq)
        if not params.mode:
            qso.mode = mode_lookup(params.freq)

    if params.mode:
        qso.mode = params.mode

    if params.time is not None:
        qso.start_at_millis = params.time

    if params.their_ref:
        qso.refs = [
            QSORef(type=hunting_tag_for(params.their_ref.program), ref=params.their_ref.ref)
        ]

    return qso
