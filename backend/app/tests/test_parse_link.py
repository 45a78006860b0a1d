import pytest

from app.exceptions import (
    IncompletePairError,
    MalformedLinkError,
    NoRefPairError,
    NotOurSchemeError,
    UnknownProgramError,
)
from app.services.activation_types import SUPPORTED_CODES, ActivationCode
from app.services.deeplink import (
    ActivationRef,
    LinkParams,
    parse_link_url,
    parse_link_url_strict,
)

SCHEME = "com.ham2k.polo://"


def test_chase_only_link() -> None:
    url = SCHEME + "qso?theirCall=K6TEST&theirRef=W6/CT-006&theirSig=sota&freq=14285000&mode=CW"
    assert parse_link_url(url).to_dict() == {
        "myRef": None,
        "mySig": None,
        "theirRef": "W6/CT-006",
        "theirSig": "sota",
        "theirCall": "K6TEST",
        "freq": 14285000,
        "mode": "CW",
        "time": None,
        "myCall": None,
    }


def test_spot_link_with_my_ref() -> None:
    p = parse_link_url(SCHEME + "qso?myRef=W6/CT-006&mySig=sota&freq=14285000&mode=CW")
    assert p.my_ref == ActivationRef("W6/CT-006", ActivationCode.SOTA)
    assert p.my_sig == "sota"
    assert p.their_ref is None
    assert p.their_sig is None
    assert p.freq == 14285000
    assert p.mode == "CW"


def test_summit_to_summit_link() -> None:
    p = parse_link_url(
        SCHEME + "qso?myRef=K-1234&mySig=pota&theirRef=W6/CT-006&theirSig=sota&theirCall=K6TEST"
    )
    assert p.my_ref.ref == "K-1234"
    assert p.my_sig == "pota"
    assert p.their_ref.ref == "W6/CT-006"
    assert p.their_sig == "sota"
    assert p.their_call == "K6TEST"


def test_all_parameters() -> None:
    url = (
        SCHEME + "qso?myRef=K-1234&mySig=pota&theirRef=W6/CT-006&theirSig=sota"
        "&freq=14285000&mode=CW&time=1704067200000&myCall=N0CALL&theirCall=K6TEST"
    )
    assert parse_link_url(url).to_dict() == {
        "myRef": "K-1234",
        "mySig": "pota",
        "theirRef": "W6/CT-006",
        "theirSig": "sota",
        "freq": 14285000,
        "mode": "CW",
        "time": 1704067200000,
        "myCall": "N0CALL",
        "theirCall": "K6TEST",
    }


@pytest.mark.parametrize("sig", SUPPORTED_CODES)
def test_supported_programs(sig) -> None:
    assert parse_link_url(f"{SCHEME}qso?myRef=TEST-123&mySig={sig}").my_sig == sig
    assert parse_link_url(f"{SCHEME}qso?theirRef=TEST-123&theirSig={sig}").their_sig == sig


@pytest.mark.parametrize(
    "url",
    [
        SCHEME + "qso?freq=14285000&mode=CW",
        SCHEME + "qso?myRef=TEST&mySig=unknown",
        SCHEME + "qso?theirRef=TEST&theirSig=iota",
        SCHEME + "qso?myRef=W6/CT-006",
        SCHEME + "qso?mySig=sota",
        SCHEME + "qso?theirRef=W6/CT-006",
        SCHEME + "qso?theirSig=sota",
        SCHEME + "qso?myRef=&mySig=sota",
        "https://example.com/qso?myRef=TEST&mySig=sota",
        SCHEME + "qso",
        SCHEME + "qso?",
        "",
    ],
)
def test_invalid_links(url) -> None:
    assert parse_link_url(url) is None


def test_unknown_sig_fails_even_with_other_pair_valid() -> None:
    assert parse_link_url(SCHEME + "qso?theirRef=W6/CT-006&theirSig=sota&mySig=iota") is None
    assert parse_link_url(SCHEME + "qso?myRef=K-1234&mySig=pota&theirRef=X&theirSig=bogus") is None


def test_incomplete_pair_ignored_when_other_pair_complete() -> None:
    p = parse_link_url(SCHEME + "qso?theirRef=W6/CT-006&theirSig=sota&mySig=pota")
    assert p.my_ref is None
    assert p.their_sig == "sota"


def test_non_string_is_not_a_link() -> None:
    assert parse_link_url(None) is None


def test_undecodable_query_is_rejected() -> None:
    assert parse_link_url(SCHEME + "qso?theirRef=%FF%FE&theirSig=sota") is None


def test_case_normalization() -> None:
    p = parse_link_url(
        SCHEME + "qso?myRef=k-1234&mySig=POTA&theirRef=w6/ct-006&theirSig=Sota"
        "&mode=cw&theirCall=k6test&myCall=n0call"
    )
    assert p.my_sig == "pota"
    assert p.their_sig == "sota"
    assert p.mode == "CW"
    assert p.their_call == "K6TEST"
    assert p.my_call == "N0CALL"
    # refs keep whatever case the sender used
    assert p.my_ref.ref == "k-1234"
    assert p.their_ref.ref == "w6/ct-006"


def test_percent_decoding() -> None:
    p = parse_link_url(SCHEME + "qso?theirRef=W6%2FCT-006&theirSig=sota&mode=ssb+fm")
    assert p.their_ref.ref == "W6/CT-006"
    assert p.mode == "SSB FM"


def test_repeated_keys_first_wins() -> None:
    p = parse_link_url(
        SCHEME + "qso?theirRef=FIRST&theirRef=SECOND&theirSig=sota&theirSig=pota&freq=7030000&freq=14030000"
    )
    assert p.their_ref.ref == "FIRST"
    assert p.their_sig == "sota"
    assert p.freq == 7030000


@pytest.mark.parametrize("raw", ["abc", "14.285", "-14285000", "0", ""])
def test_bad_freq_is_dropped(raw) -> None:
    p = parse_link_url(f"{SCHEME}qso?theirRef=TEST&theirSig=sota&freq={raw}")
    assert p is not None
    assert p.freq is None


@pytest.mark.parametrize("raw", ["%D9%A1%D9%A4%D9%A2", "14285000%0A", "%EF%BC%91%EF%BC%94"])
def test_non_ascii_digits_and_newlines_are_dropped(raw) -> None:
    p = parse_link_url(f"{SCHEME}qso?theirRef=TEST&theirSig=sota&freq={raw}&time={raw}")
    assert p is not None
    assert p.freq is None
    assert p.time is None


def test_oversized_numbers_are_dropped() -> None:
    digits = "1" * 5000
    p = parse_link_url(f"{SCHEME}qso?theirRef=TEST&theirSig=sota&freq={digits}&time=-{digits}&mode=cw")
    assert p is not None
    assert p.freq is None
    assert p.time is None
    assert p.mode == "CW"


def test_bad_time_is_dropped() -> None:
    p = parse_link_url(SCHEME + "qso?theirRef=TEST&theirSig=sota&time=soon")
    assert p is not None
    assert p.time is None


def test_time_has_no_range_check() -> None:
    assert parse_link_url(SCHEME + "qso?theirRef=TEST&theirSig=sota&time=5").time == 5


def test_unknown_keys_ignored() -> None:
    p = parse_link_url(SCHEME + "qso?theirRef=TEST&theirSig=sota&rst=599&foo=bar")
    assert p.to_dict()["theirRef"] == "TEST"


def test_custom_scheme() -> None:
    assert parse_link_url("polo-test://qso?theirRef=TEST&theirSig=sota", scheme="polo-test://")
    assert parse_link_url(SCHEME + "qso?theirRef=TEST&theirSig=sota", scheme="polo-test://") is None


@pytest.mark.parametrize(
    "url, error",
    [
        ("https://example.com/qso?theirRef=T&theirSig=sota", NotOurSchemeError),
        (SCHEME + "qso", MalformedLinkError),
        (SCHEME + "qso?theirRef=T", IncompletePairError),
        (SCHEME + "qso?freq=14285000", NoRefPairError),
        (SCHEME + "qso?theirRef=T&theirSig=iota", UnknownProgramError),
    ],
)
def test_strict_parse_classifies_failures(url, error) -> None:
    with pytest.raises(error):
        parse_link_url_strict(url)


def test_link_params_require_a_ref() -> None:
    with pytest.raises(ValueError):
        LinkParams(freq=14285000)
