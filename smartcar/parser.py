"""Builds structured responses (body + meta) and applies alias tables."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from .errors import header_value
from .structured import Record, StructuredValue, normalize

REQUEST_ID_HEADER = "sc-request-id"
DATA_AGE_HEADER = "sc-data-age"
UNIT_SYSTEM_HEADER = "sc-unit-system"
FETCHED_AT_HEADER = "sc-fetched-at"

_FRACTION = re.compile(r"\.(\d+)")


@dataclass(frozen=True)
class ResponseMeta:
    request_id: Optional[str] = None
    data_age: Optional[datetime] = None
    fetched_at: Optional[datetime] = None
    unit_system: Optional[str] = None


def parse_date_safely(value: Optional[str]) -> Optional[datetime]:
    """ISO-8601 timestamp or None; never raises."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat on 3.10 only takes 3 or 6 fraction digits
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def build_meta(headers: Optional[Mapping[str, Any]]) -> ResponseMeta:
    return ResponseMeta(
        request_id=header_value(headers, REQUEST_ID_HEADER),
        data_age=parse_date_safely(header_value(headers, DATA_AGE_HEADER)),
        fetched_at=parse_date_safely(header_value(headers, FETCHED_AT_HEADER)),
        unit_system=header_value(headers, UNIT_SYSTEM_HEADER),
    )


def build_response(body: Any, headers: Optional[Mapping[str, Any]]) -> Record:
    """
    Normalize a response body and attach ``meta``.

    Top-level arrays are exposed under ``items`` so every response has a
    record wrapper carrying ``meta``.
    """
    meta = build_meta(headers)
    if isinstance(body, list):
        return Record(items=normalize(body), meta=meta)
    if isinstance(body, dict):
        return normalize(body).with_fields(meta=meta)
    if isinstance(body, Record):
        return body.with_fields(meta=meta)
    if body is None or body == "":
        return Record(meta=meta)
    return Record(body=body, meta=meta)


def apply_aliases(value: StructuredValue, aliases: Optional[Mapping[str, str]]) -> StructuredValue:
    """Copy wire fields under their alias names, keeping the originals."""
    if not aliases or not isinstance(value, Record):
        return value
    added = {alias: value[wire] for wire, alias in aliases.items() if wire in value}
    if not added:
        return value
    return value.with_fields(**added)
