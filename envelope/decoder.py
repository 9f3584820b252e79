from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Type, TypeVar

from pydantic import TypeAdapter

from envelope.types import DATA_TYPE, ERROR_TYPE, Envelope, ErrorInfo, RawEnvelope

T = TypeVar("T")

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _adapter(payload_type: Any) -> TypeAdapter:
    return TypeAdapter(payload_type)


def decode(json_text: str | bytes, payload_type: Type[T]) -> Envelope[T]:
    """
    Decode a `{type, data}` document into an Envelope[payload_type].

    The discriminator is read first; an "error" envelope has its payload
    mapped onto ErrorInfo and never touches payload_type. A null error
    payload still yields an error envelope, with ErrorInfo defaults.
    Malformed JSON or an incompatible payload raises pydantic.ValidationError.
    """
    raw = RawEnvelope.model_validate_json(json_text)
    model = Envelope[payload_type]

    if raw.type == ERROR_TYPE:
        error = ErrorInfo.model_validate(raw.data if raw.data is not None else {})
        logger.debug("decoded error envelope id=%s", error.id)
        return model(type=raw.type, data=None, error=error)

    data = None
    if raw.data is not None:
        data = _adapter(payload_type).validate_python(raw.data)
    logger.debug("decoded %s envelope as %s", raw.type, getattr(payload_type, "__name__", payload_type))
    return model(type=raw.type, data=data, error=None)


def to_wire(envelope: Envelope[Any]) -> dict[str, Any]:
    """Wire shape: error envelopes carry the ErrorInfo in the `data` slot."""
    payload = envelope.error if envelope.is_error else envelope.data
    return {"type": envelope.type, "data": _adapter(Any).dump_python(payload, mode="json", by_alias=True)}


def encode(envelope: Envelope[Any]) -> str:
    return json.dumps(to_wire(envelope), separators=(",", ":"), ensure_ascii=False)


def wrap(payload: Any, kind: str = DATA_TYPE) -> Envelope[Any]:
    return Envelope[Any](type=kind, data=payload)


def wrap_error(error_id: int, description: str | None) -> Envelope[Any]:
    return Envelope[Any](type=ERROR_TYPE, error=ErrorInfo(id=error_id, description=description))
