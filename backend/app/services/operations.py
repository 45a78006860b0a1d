"""Resolve the local operation for a deep link and hand back the suggestion.

The operation store itself belongs to the host application; anything that
implements ``OperationStore`` can be used. ``InMemoryOperationStore`` is
enough for tests and the demo API.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol

from app.exceptions import OperationStoreError
from app.services.activation_types import ActivationCode, activation_tag_for
from app.services.bandplan import band_for_frequency, mode_for_frequency
from app.services.deeplink import (
    URL_SCHEME,
    ActivationRef,
    BandLookup,
    Clock,
    LinkParams,
    ModeLookup,
    QSORef,
    SuggestedQSO,
    build_suggested_qso,
    now_millis,
    parse_link_url,
)

logger = logging.getLogger(__name__)

GENERIC_TITLE = "General Operation"

# activation tag -> program label used in derived titles
_TITLE_LABELS = {activation_tag_for(code): code.value.upper() for code in ActivationCode}


@dataclass
class Operation:
    uuid: str
    refs: List[QSORef] = field(default_factory=list)
    title: str = GENERIC_TITLE
    deleted: bool = False

    def find_ref(self, ref_type: str) -> Optional[QSORef]:
        for r in self.refs:
            if r.type == ref_type:
                return r
        return None


class OperationStore(Protocol):
    def operations(self) -> Iterable[Operation]: ...

    def add_operation(
        self, refs: Optional[List[QSORef]] = None, use_templates: bool = False
    ) -> Operation: ...

    def set_operation_data(self, op_uuid: str, refs: List[QSORef]) -> Operation: ...


class InMemoryOperationStore:
    def __init__(self) -> None:
        self._ops: Dict[str, Operation] = {}
        self._lock = threading.Lock()

    def operations(self) -> List[Operation]:
        with self._lock:
            return list(self._ops.values())

    def add_operation(
        self, refs: Optional[List[QSORef]] = None, use_templates: bool = False
    ) -> Operation:
        # use_templates only matters to stores that keep operation templates
        op = Operation(uuid=str(uuid.uuid4()), refs=list(refs or []))
        with self._lock:
            self._ops[op.uuid] = op
        return op

    def set_operation_data(self, op_uuid: str, refs: List[QSORef]) -> Operation:
        with self._lock:
            op = self._ops.get(op_uuid)
            if op is None:
                raise KeyError(op_uuid)
            op.refs = list(refs)
            op.title = derive_title(op.refs)
            return op

    def delete_operation(self, op_uuid: str) -> None:
        with self._lock:
            op = self._ops.get(op_uuid)
            if op is not None:
                op.deleted = True


def derive_title(refs: Iterable[QSORef]) -> str:
    parts = [f"{_TITLE_LABELS.get(r.type, r.type)} {r.ref}" for r in refs]
    return ", ".join(parts) if parts else GENERIC_TITLE


def find_or_create_operation(store: OperationStore, my_ref: Optional[ActivationRef]) -> Operation:
    """Return the operation activating ``my_ref``, creating it if needed.

    Without ``my_ref`` (a chase-only link) a generic operation is created.
    Matching uses the activation type (``potaActivation``) and an exact ref.
    """
    if my_ref is None:
        return store.add_operation(use_templates=True)

    activation_type = activation_tag_for(my_ref.program)
    for op in store.operations():
        if op is None or op.deleted:
            continue
        found = op.find_ref(activation_type)
        if found is not None and found.ref == my_ref.ref:
            return op

    refs = [QSORef(type=activation_type, ref=my_ref.ref)]
    op = store.add_operation(refs=refs)
    # lets the store decorate the refs and derive a title
    return store.set_operation_data(op.uuid, refs=op.refs)


@dataclass
class DeepLinkResult:
    params: LinkParams
    operation: Operation
    qso: SuggestedQSO


class DeepLinkHandler:
    """Turn incoming deep links into an operation plus a suggested QSO.

    Some platforms deliver the same link twice (cold start plus the URL
    event); a link equal to the last one handled is ignored.
    """

    def __init__(
        self,
        store: OperationStore,
        band_lookup: BandLookup = band_for_frequency,
        mode_lookup: ModeLookup = mode_for_frequency,
        clock: Clock = now_millis,
        scheme: str = URL_SCHEME,
    ):
        self.store = store
        self.band_lookup = band_lookup
        self.mode_lookup = mode_lookup
        self.clock = clock
        self.scheme = scheme
        self._last_url: Optional[str] = None
        self._lock = threading.Lock()

    def is_duplicate(self, url: str) -> bool:
        with self._lock:
            return url == self._last_url

    def reset(self) -> None:
        with self._lock:
            self._last_url = None

    def _claim(self, url: str) -> bool:
        with self._lock:
            if url == self._last_url:
                return False
            self._last_url = url
            return True

    def handle(self, url: Optional[str]) -> Optional[DeepLinkResult]:
        if not url or not url.startswith(self.scheme):
            return None
        if self.is_duplicate(url):
            logger.debug("[DeepLink] Already processed: %s", url)
            return None

        # invalid links are not remembered, so only valid ones count as duplicates
        params = parse_link_url(url, self.scheme)
        if params is None:
            logger.info("[DeepLink] Could not parse URL: %s", url)
            return None
        if not self._claim(url):
            logger.debug("[DeepLink] Already processed: %s", url)
            return None

        qso = build_suggested_qso(params, self.band_lookup, self.mode_lookup, self.clock)
        try:
            operation = find_or_create_operation(self.store, params.my_ref)
        except Exception as e:
            logger.exception("[DeepLink] Error handling deep link: %s", url)
            raise OperationStoreError(f"Could not resolve operation: {e}") from e

        logger.info(
            "[DeepLink] Suggesting QSO %s in operation %s", qso.suggestion_key, operation.uuid
        )
        return DeepLinkResult(params=params, operation=operation, qso=qso)
