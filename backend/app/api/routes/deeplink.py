"""Deep-link API routes: parse a link, build its suggested QSO, or open it."""

from functools import lru_cache
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, status

from ...core.config import get_settings
from ...services.bandplan import band_for_frequency, mode_for_frequency
from ...services.deeplink import (
    BandLookup,
    LinkParams,
    ModeLookup,
    SuggestedQSO,
    build_suggested_qso,
    parse_link_url,
)
from ...services.operations import DeepLinkHandler, InMemoryOperationStore, Operation
from ...schemas.deeplink import (
    DeepLinkOpenModel,
    DeepLinkRequest,
    LinkParamsModel,
    OperationModel,
    QSORefModel,
    SuggestedQSOModel,
)

router = APIRouter(prefix="/deeplink", tags=["deeplink"])

INVALID_LINK = "Not a valid deep link"


def _no_lookup(hz: int) -> Optional[str]:
    return None


def get_lookups() -> Tuple[BandLookup, ModeLookup]:
    if get_settings().use_bandplan:
        return band_for_frequency, mode_for_frequency
    return _no_lookup, _no_lookup


@lru_cache(maxsize=1)
def get_handler() -> DeepLinkHandler:
    band_lookup, mode_lookup = get_lookups()
    return DeepLinkHandler(
        InMemoryOperationStore(),
        band_lookup=band_lookup,
        mode_lookup=mode_lookup,
        scheme=get_settings().url_scheme,
    )


def _parse_or_422(url: str) -> LinkParams:
    params = parse_link_url(url, get_settings().url_scheme)
    if params is None:
        raise HTTPException(status_code=422, detail=INVALID_LINK)
    return params


def _qso_model(qso: SuggestedQSO) -> SuggestedQSOModel:
    return SuggestedQSOModel(**qso.to_dict())


def _operation_model(op: Operation) -> OperationModel:
    return OperationModel(
        uuid=op.uuid,
        title=op.title,
        refs=[QSORefModel(type=r.type, ref=r.ref) for r in op.refs],
    )


@router.post("/parse", response_model=LinkParamsModel, summary="Parse a deep link")
async def parse_link(body: DeepLinkRequest) -> LinkParamsModel:
    return LinkParamsModel(**_parse_or_422(body.url).to_dict())


@router.post("/suggest", response_model=SuggestedQSOModel, summary="Build a suggested QSO")
async def suggest_qso(
    body: DeepLinkRequest,
    lookups: Tuple[BandLookup, ModeLookup] = Depends(get_lookups),
) -> SuggestedQSOModel:
    band_lookup, mode_lookup = lookups
    params = _parse_or_422(body.url)
    return _qso_model(build_suggested_qso(params, band_lookup, mode_lookup))


@router.post("/open", response_model=DeepLinkOpenModel, summary="Open a deep link")
async def open_link(
    body: DeepLinkRequest,
    handler: DeepLinkHandler = Depends(get_handler),
) -> DeepLinkOpenModel:
    """Resolve the operation for a link and return it with the suggested QSO.

    Returns 409 when the same link was just handled, 422 when it is invalid.
    """
    if handler.is_duplicate(body.url):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Deep link already processed")
    result = handler.handle(body.url)
    if result is None:
        raise HTTPException(status_code=422, detail=INVALID_LINK)
    return DeepLinkOpenModel(operation=_operation_model(result.operation), qso=_qso_model(result.qso))
