"""Document id lifecycle.

A document handle starts either bound to an id given at construction, or
unbound. An unbound handle binds the first time it saves: to the ``_id``
embedded in the payload (before the request goes out), or to the id the
server generated for a POST (after the response comes back). Once bound it
never changes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel

from .errors import CBLiteError, InvalidNameError, InvalidPayloadKind

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class IdentityState(str, Enum):
    UNBOUND = "unbound"
    BOUND = "bound"


class DocumentIdentity:
    """Two-state machine: ``UNBOUND`` -> ``BOUND(id)``, exactly once."""

    def __init__(self, doc_id: str | None = None):
        self._id: str | None = None
        if doc_id:
            self.bind(doc_id)

    @property
    def id(self) -> str | None:
        return self._id

    @property
    def state(self) -> IdentityState:
        return IdentityState.UNBOUND if self._id is None else IdentityState.BOUND

    @property
    def is_bound(self) -> bool:
        return self._id is not None

    def bind(self, doc_id: str) -> str:
        if self._id is not None:
            raise CBLiteError(f"Document is already bound to {self._id!r}")
        if not doc_id:
            raise InvalidNameError("Cannot bind a document to an empty id")
        self._id = doc_id
        logger.debug("Bound document handle to id %s", doc_id)
        return doc_id

    def __repr__(self) -> str:
        if self._id is None:
            return "DocumentIdentity(UNBOUND)"
        return f"DocumentIdentity(BOUND {self._id!r})"


@dataclass(frozen=True)
class SaveTarget:
    method: Literal["PUT", "POST"]
    doc_id: str | None = None


def payload_kind(payload: Any) -> str:
    if payload is MISSING:
        return "undefined"
    if payload is None:
        return "null"
    return type(payload).__name__


def validate_payload(payload: Any = MISSING) -> dict[str, Any]:
    """Return the payload as a plain dict or raise ``InvalidPayloadKind``."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True, exclude_none=True)
    if isinstance(payload, Mapping):
        return dict(payload)
    raise InvalidPayloadKind(payload_kind(payload))


def resolve_save_target(identity: DocumentIdentity, payload: Mapping[str, Any]) -> SaveTarget:
    """Pick PUT to a known id, or POST to let the server assign one.

    An ``_id`` embedded in the payload binds an unbound identity immediately.
    """
    if identity.is_bound:
        return SaveTarget("PUT", identity.id)

    embedded = payload.get("_id")
    if embedded is not None:
        return SaveTarget("PUT", identity.bind(str(embedded)))

    return SaveTarget("POST")
