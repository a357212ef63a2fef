"""Batch requests: one POST bundling several vehicle resources, demultiplexed per resource."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .api_client import merge_headers
from .endpoints import VEHICLE_RESOURCES, batch_paths, path_to_name
from .errors import SUCCESS_CODES, InvalidParameterValue, SmartcarApiError, build_error, error_from_body
from .parser import apply_aliases, build_meta, build_response
from .structured import Record

logger = logging.getLogger(__name__)


class BatchResult(Record):
    """
    Per-resource results of a batch request.

    Fields holding a ``SmartcarApiError`` raise it when read, so one failed
    resource does not prevent reading the others.
    """

    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        return _raise_if_error(super().__getattr__(name))

    def __getitem__(self, name: str) -> Any:
        return _raise_if_error(super().__getitem__(name))

    def get(self, name: str, default: Any = None) -> Any:
        return _raise_if_error(super().get(name, default))

    def errors(self) -> Dict[str, SmartcarApiError]:
        """Failed resources by name, without raising."""
        return {
            name: value for name, value in self._fields.items()
            if isinstance(value, SmartcarApiError)
        }

    def succeeded(self) -> List[str]:
        return [
            name for name, value in self._fields.items()
            if name != "meta" and not isinstance(value, SmartcarApiError)
        ]


def _raise_if_error(value: Any) -> Any:
    if isinstance(value, SmartcarApiError):
        raise value
    return value


def resolve_batch_paths(requested: Iterable[str]) -> List[str]:
    """
    Map requested names or relative paths to batch paths.

    Raises:
        InvalidParameterValue: listing every unsupported entry, before any request.
    """
    if requested is None:
        raise InvalidParameterValue("paths is a required field")
    allowed = batch_paths()
    allowed_paths = set(allowed.values())

    resolved: List[str] = []
    unsupported: List[str] = []
    for item in requested:
        item = str(item)
        if item in allowed:
            resolved.append(allowed[item])
        elif item in allowed_paths:
            resolved.append(item)
        else:
            unsupported.append(item)

    if unsupported:
        raise InvalidParameterValue(
            f"Unsupported attribute(s) requested in batch - {','.join(unsupported)}"
        )
    return resolved


def build_batch_body(paths: Iterable[str]) -> Dict[str, Any]:
    return {"requests": [{"path": path} for path in paths]}


def _process_item(item: Mapping[str, Any], outer_headers: Mapping[str, Any]) -> Any:
    headers = merge_headers(outer_headers or {}, item.get("headers"))
    status = item.get("code")
    body = item.get("body")
    name = path_to_name(item.get("path", ""))

    if status in SUCCESS_CODES:
        spec = VEHICLE_RESOURCES.get(name)
        return apply_aliases(build_response(body, headers), spec.aliases if spec else None)

    if isinstance(body, str):
        return build_error(status, body, headers)
    return error_from_body(status, body, headers)


def process_batch_response(response: Mapping[str, Any], headers: Optional[Mapping[str, Any]] = None) -> BatchResult:
    """Split a batch response into a ``BatchResult`` keyed by logical name."""
    results: Dict[str, Any] = {}
    failed = 0
    for item in response.get("responses") or []:
        name = path_to_name(item.get("path", ""))
        value = _process_item(item, headers or {})
        if isinstance(value, SmartcarApiError):
            failed += 1
        results[name] = value
    logger.debug("Batch response: %s items, %s failed", len(results), failed)
    results["meta"] = build_meta(headers)
    return BatchResult(results)


class BatchOrchestrator:
    """Runs batch requests through an ``ApiClient``."""

    def __init__(self, api_client):
        self.api_client = api_client

    async def batch(self, vehicle_id: str, paths: Iterable[str]) -> BatchResult:
        resolved = resolve_batch_paths(paths)
        body, headers = await self.api_client.post(
            f"/vehicles/{vehicle_id}/batch", body=build_batch_body(resolved)
        )
        return process_batch_response(body, headers)
