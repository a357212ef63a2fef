import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from smartcar.transport import RawResponse


class FakeTransport:
    """Records every request and replays queued responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def queue(self, status=200, body=None, headers=None):
        if headers is None:
            headers = {"Content-Type": "application/json"}
        text = body if isinstance(body, str) else ("" if body is None else json.dumps(body))
        self.responses.append(RawResponse(status=status, headers=headers, body=text))
        return self

    async def send(self, method, url, headers=None, body=None):
        self.requests.append({"method": method, "url": url, "headers": dict(headers or {}), "body": body})
        return self.responses.pop(0)

    @property
    def last(self):
        return self.requests[-1]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "MODE",
        "SMARTCAR_API_ORIGIN",
        "SMARTCAR_MANAGEMENT_API_ORIGIN",
        "SMARTCAR_AUTH_ORIGIN",
        "SMARTCAR_CONNECT_ORIGIN",
        "SMARTCAR_CLIENT_ID",
        "SMARTCAR_CLIENT_SECRET",
        "SMARTCAR_REDIRECT_URI",
    ):
        monkeypatch.delenv(name, raising=False)
