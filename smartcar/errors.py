"""
Error taxonomy for the Smartcar client.
Normalizes the legacy flat and the structured v2 error bodies into one shape.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

from .structured import Record, normalize

logger = logging.getLogger(__name__)

SUCCESS_CODES = (200, 204)
SDK_ERROR = "SDK_ERROR"

# Fields lifted into named attributes; anything else lands in ``extra``.
_KNOWN_FIELDS = (
    "type", "code", "description", "requestId", "statusCode",
    "docURL", "resolution", "detail",
)


class SmartcarException(Exception):
    """Base class for everything raised by this package."""


class InvalidParameterValue(SmartcarException, ValueError):
    """Raised before any request when caller arguments are invalid."""


class ConfigNotFound(SmartcarException):
    """Raised when a required environment variable is absent."""


class SmartcarTransportError(SmartcarException):
    """No HTTP response was received (DNS, timeout, connection reset)."""


class SmartcarApiError(SmartcarException):
    """
    A non-2xx response from the Smartcar API.

    Either built from a JSON body (legacy ``{"error", "message"}`` or the v2
    ``{"type", "code", "description", ...}`` shape) or, when the response is
    not JSON, carrying the raw body as its message.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        type: Optional[str] = None,
        code: Optional[str] = None,
        description: Optional[str] = None,
        request_id: Optional[str] = None,
        doc_url: Optional[str] = None,
        resolution: Optional[Record] = None,
        detail: Any = None,
        retry_after: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.type = type
        self.code = code
        self.description = description
        self.request_id = request_id
        self.doc_url = doc_url
        self.resolution = resolution
        self.detail = detail
        self.retry_after = retry_after
        self.extra = extra or {}

    def __reduce__(self):
        # Keyword fields travel as state; args alone cannot rebuild the error.
        return type(self), (self.status_code, self.message), dict(self.__dict__)

    def __repr__(self):
        return f"SmartcarApiError(status_code={self.status_code!r}, message={self.message!r})"


def header_value(headers: Optional[Mapping[str, Any]], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    if not headers:
        return None
    if name in headers:
        return headers[name]
    wanted = name.lower()
    for key, value in headers.items():
        if str(key).lower() == wanted:
            return value
    return None


def _is_json(headers: Optional[Mapping[str, Any]]) -> bool:
    content_type = header_value(headers, "content-type") or ""
    return "json" in content_type.lower()


def _build_resolution(value: Any) -> Optional[Record]:
    if value is None:
        return None
    if isinstance(value, str):
        return Record({"type": value})
    return normalize(value)


def error_from_body(status: int, body: Any, headers: Optional[Mapping[str, Any]] = None) -> Optional[SmartcarApiError]:
    """Build an error from an already decoded JSON body."""
    if status in SUCCESS_CODES:
        return None

    if not isinstance(body, dict):
        body = {"description": json.dumps(body) if body is not None else "Unknown error"}
    body = dict(body)

    if body.get("error") is not None:
        body["type"] = body.pop("error")
    if body.get("description") is None:
        if body.get("error_description") is not None:
            body["description"] = body.pop("error_description")
        elif body.get("message") is not None:
            body["description"] = body.pop("message")
        else:
            body["description"] = "Unknown error"
    if body.get("type") is None:
        body["type"] = SDK_ERROR

    error_type = body["type"]
    code = body.get("code")
    description = body["description"]
    message = f"{error_type}:{code if code is not None else ''} - {description}"

    return SmartcarApiError(
        status_code=status,
        message=message,
        type=error_type,
        code=code,
        description=description,
        request_id=body.get("requestId") or header_value(headers, "sc-request-id"),
        doc_url=body.get("docURL"),
        resolution=_build_resolution(body.get("resolution")),
        detail=normalize(body.get("detail")),
        retry_after=header_value(headers, "retry-after"),
        extra={key: normalize(value) for key, value in body.items() if key not in _KNOWN_FIELDS},
    )


def build_error(status: int, raw_body: str, headers: Optional[Mapping[str, Any]] = None) -> Optional[SmartcarApiError]:
    """
    Classify an HTTP response.

    Returns None for 200/204, otherwise always a SmartcarApiError.
    """
    if status in SUCCESS_CODES:
        return None

    raw_body = raw_body or ""
    if not _is_json(headers):
        return SmartcarApiError(
            status_code=status,
            message=raw_body,
            request_id=header_value(headers, "sc-request-id"),
            retry_after=header_value(headers, "retry-after"),
        )

    try:
        body = json.loads(raw_body)
    except ValueError as e:
        logger.warning("Could not decode error body (status %s): %s", status, e)
        description = str(e)
        return SmartcarApiError(
            status_code=status,
            message=f"{SDK_ERROR}: - {description}",
            type=SDK_ERROR,
            description=description,
            request_id=header_value(headers, "sc-request-id"),
            retry_after=header_value(headers, "retry-after"),
        )

    return error_from_body(status, body, headers)
