"""Async API client: header and query construction, response classification."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import quote, urlencode

from .auth.authentication import BEARER, SmartcarAuthenticator
from .config import ApiConfig
from .errors import build_error
from .transport import HttpTransport

logger = logging.getLogger(__name__)

METRIC = "metric"
IMPERIAL = "imperial"
UNITS = (METRIC, IMPERIAL)


def stringify_flags(flags: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Flags as ``key:value`` pairs joined by spaces."""
    if not flags:
        return None
    return " ".join(f"{key}:{_flag_value(value)}" for key, value in flags.items())


def _flag_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(params: Optional[Mapping[str, Any]]) -> str:
    """URL-encode non-empty params; spaces become ``%20``."""
    if not params:
        return ""
    cleaned = []
    for key, value in params.items():
        if value is None or value == "" or value == {} or value == []:
            continue
        if key == "flags" and isinstance(value, Mapping):
            value = stringify_flags(value)
        elif isinstance(value, bool):
            value = "true" if value else "false"
        cleaned.append((key, value))
    return urlencode(cleaned, quote_via=quote)


def merge_headers(defaults: Mapping[str, str], overrides: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Apply caller headers over the defaults, replacing names case-insensitively."""
    merged = dict(defaults)
    for key, value in (overrides or {}).items():
        for existing in [name for name in merged if name.lower() == str(key).lower()]:
            del merged[existing]
        merged[str(key)] = str(value)
    return merged


class ApiClient:
    """
    Issues single requests against the Smartcar API.

    Stateless between calls: the credential, unit system and flags are fixed
    at construction and a per-call ``auth`` override is passed explicitly.
    """

    def __init__(
        self,
        token: str,
        auth_type: str = BEARER,
        config: Optional[ApiConfig] = None,
        unit_system: Optional[str] = None,
        flags: Optional[Mapping[str, Any]] = None,
        transport: Optional[HttpTransport] = None,
        management: bool = False,
    ):
        self.config = config or ApiConfig.from_env()
        self.authenticator = SmartcarAuthenticator(token, auth_type)
        self.unit_system = unit_system
        self.flags = dict(flags or {})
        self.transport = transport or HttpTransport(timeout=self.config.timeout)
        self.management = management

    def build_url(self, path: str, query: Optional[Mapping[str, Any]] = None) -> str:
        params = dict(query or {})
        if self.flags and "flags" not in params:
            params["flags"] = self.flags
        query_string = build_query(params)
        url = f"{self.config.base_url(self.management)}{path}"
        if query_string:
            url += ("&" if "?" in path else "?") + query_string
        return url

    def build_headers(
        self,
        headers: Optional[Mapping[str, Any]] = None,
        auth: Optional[SmartcarAuthenticator] = None,
    ) -> Dict[str, str]:
        defaults = dict((auth or self.authenticator).get_headers())
        if self.unit_system:
            defaults["sc-unit-system"] = self.unit_system
        defaults["Content-Type"] = "application/json"
        return merge_headers(defaults, headers)

    async def request(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Any] = None,
        headers: Optional[Mapping[str, Any]] = None,
        auth: Optional[SmartcarAuthenticator] = None,
    ) -> Tuple[Any, Dict[str, str]]:
        """
        Send one request and return ``(decoded_body, response_headers)``.

        Raises:
            SmartcarApiError: for any non-200/204 response.
            SmartcarTransportError: when no response was received.
        """
        method = method.upper()
        url = self.build_url(path, query)
        payload = json.dumps(body) if body is not None and method != "GET" else None

        response = await self.transport.send(method, url, self.build_headers(headers, auth), payload)
        logger.debug("%s %s -> Status: %s", method, path, response.status)

        error = build_error(response.status, response.body, response.headers)
        if error:
            logger.warning("%s %s failed: %s", method, path, error.message)
            raise error

        if not response.body:
            return {}, response.headers
        try:
            return json.loads(response.body), response.headers
        except ValueError:
            logger.debug("%s %s returned a non-JSON body", method, path)
            return response.body, response.headers

    async def get(self, path: str, query: Optional[Mapping[str, Any]] = None, **kwargs):
        return await self.request("GET", path, query=query, **kwargs)

    async def post(self, path: str, body: Optional[Any] = None, query: Optional[Mapping[str, Any]] = None, **kwargs):
        return await self.request("POST", path, query=query, body=body, **kwargs)

    async def put(self, path: str, body: Optional[Any] = None, query: Optional[Mapping[str, Any]] = None, **kwargs):
        return await self.request("PUT", path, query=query, body=body, **kwargs)

    async def delete(self, path: str, query: Optional[Mapping[str, Any]] = None, **kwargs):
        return await self.request("DELETE", path, query=query, **kwargs)
