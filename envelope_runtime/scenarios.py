from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel

from envelope.types import Customer, Supplier

DEFAULT_SCENARIOS_PATH = Path(__file__).resolve().parent / "demo.yaml"

PAYLOAD_TYPES: Dict[str, type] = {
    "customer": Customer,
    "supplier": Supplier,
    "string": str,
}


@dataclass
class DemoCall:
    title: str
    payload_type: type
    label: str
    field: Optional[str] = None
    path: Optional[str] = None
    body: Optional[str] = None


def resolve_payload_type(name: str) -> type:
    try:
        return PAYLOAD_TYPES[name]
    except KeyError:
        raise ValueError(f"Unknown payload type: {name}") from None


def _check_field(payload_type: type, field: Optional[str]) -> None:
    if field is None:
        return
    if not (isinstance(payload_type, type) and issubclass(payload_type, BaseModel)):
        raise ValueError(f"Payload type {payload_type.__name__} has no fields; drop 'field: {field}'")
    if field not in payload_type.model_fields:
        known = ", ".join(sorted(payload_type.model_fields))
        raise ValueError(f"Unknown field {field!r} for {payload_type.__name__} (expected one of: {known})")


def parse_calls(doc: Dict[str, Any]) -> List[DemoCall]:
    calls: List[DemoCall] = []
    for item in (doc or {}).get("calls") or []:
        if not item.get("path") and not item.get("body"):
            raise ValueError(f"Call {item.get('title')!r} needs either a path or a body")
        payload_type = resolve_payload_type(str(item.get("payload", "")))
        _check_field(payload_type, item.get("field"))
        calls.append(
            DemoCall(
                title=str(item.get("title", "")),
                payload_type=payload_type,
                label=str(item.get("label", "Value")),
                field=item.get("field"),
                path=item.get("path"),
                body=item.get("body"),
            )
        )
    return calls


def load_calls(path: Optional[str] = None) -> List[DemoCall]:
    """Load demo calls from `path`, or from the packaged demo.yaml when no path is given."""
    p = Path(path) if path else DEFAULT_SCENARIOS_PATH
    with p.open("r", encoding="utf-8") as f:
        return parse_calls(yaml.safe_load(f))
