import asyncio

import aiohttp
import pytest

from smartcar.errors import SmartcarTransportError
from smartcar.transport import HttpTransport


class FakeResponse:
    status = 200
    headers = {"Content-Type": "application/json", "sc-request-id": "rid"}

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def text(self):
        return '{"distance": 1}'


class FakeSession:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def request(self, method, url, headers=None, data=None):
        self.calls.append((method, url, headers, data))
        if self.error:
            raise self.error
        return FakeResponse()


def test_send_uses_injected_session():
    session = FakeSession()
    response = asyncio.run(HttpTransport(session=session).send("GET", "https://example.test/x", {"A": "b"}))

    assert response.status == 200
    assert response.body == '{"distance": 1}'
    assert response.headers["sc-request-id"] == "rid"
    assert session.calls == [("GET", "https://example.test/x", {"A": "b"}, None)]


def test_connection_errors_are_wrapped():
    session = FakeSession(aiohttp.ClientConnectionError("connection refused"))

    with pytest.raises(SmartcarTransportError) as exc:
        asyncio.run(HttpTransport(session=session).send("GET", "https://example.test/x"))
    assert isinstance(exc.value.__cause__, aiohttp.ClientError)
    assert "connection refused" in str(exc.value)


def test_timeouts_are_wrapped():
    session = FakeSession(asyncio.TimeoutError())

    with pytest.raises(SmartcarTransportError, match="Request timeout"):
        asyncio.run(HttpTransport(session=session).send("POST", "https://example.test/x", body="{}"))
