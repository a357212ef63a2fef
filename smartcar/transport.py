"""aiohttp-backed HTTP transport."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

import aiohttp

from .config.api_config import DEFAULT_REQUEST_TIMEOUT
from .errors import SmartcarTransportError

logger = logging.getLogger(__name__)


@dataclass
class RawResponse:
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""


class HttpTransport:
    """
    Sends one HTTP request and returns the raw status, headers and body.

    Uses the injected ``session`` when given; otherwise opens a short-lived
    session per call. Connection errors and timeouts are raised as
    ``SmartcarTransportError``.
    """

    def __init__(self, timeout: float = DEFAULT_REQUEST_TIMEOUT, session: Optional[aiohttp.ClientSession] = None):
        self.timeout = timeout
        self.session = session

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[str] = None,
    ) -> RawResponse:
        try:
            if self.session is not None:
                return await self._send(self.session, method, url, headers, body)
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                return await self._send(session, method, url, headers, body)
        except asyncio.TimeoutError as e:
            logger.warning("Request timeout for %s %s", method, url)
            raise SmartcarTransportError(f"Request timeout for {method} {url}") from e
        except aiohttp.ClientError as e:
            message = str(e) or type(e).__name__
            logger.warning("Request error for %s %s: %s", method, url, message)
            raise SmartcarTransportError(f"Request failed: {message} ({method} {url})") from e

    @staticmethod
    async def _send(session, method, url, headers, body) -> RawResponse:
        async with session.request(method, url, headers=dict(headers or {}), data=body) as response:
            text = await response.text()
            return RawResponse(status=response.status, headers=dict(response.headers), body=text)
