import asyncio
import base64
import hashlib
import hmac

import pytest

from smartcar import management
from smartcar.errors import ConfigNotFound, InvalidParameterValue

INVALID_MODE = "The \"mode\" parameter MUST be one of the following: 'test', 'live', 'simulated'"


def basic(user, password):
    return "Basic " + base64.b64encode(f"{user}:{password}".encode()).decode()


def test_compatibility_request(transport):
    transport.queue(200, {"compatible": True, "reason": None, "capabilities": []}, {
        "Content-Type": "application/json", "sc-request-id": "rid",
    })
    result = asyncio.run(management.get_compatibility(
        "vin", ["read_odometer", "read_fuel"], "US",
        {"client_id": "cid", "client_secret": "secret", "flags": {"flag": "suboption"}, "transport": transport},
    ))

    assert result.compatible is True
    assert result.meta.request_id == "rid"
    request = transport.last
    assert request["headers"]["Authorization"] == basic("cid", "secret")
    assert request["url"] == (
        "https://api.smartcar.com/v2.0/compatibility"
        "?vin=vin&scope=read_odometer%20read_fuel&country=US&flags=flag%3Asuboption"
    )


def test_compatibility_modes(transport):
    options = {"client_id": "cid", "client_secret": "secret", "transport": transport}
    transport.queue(200, {"compatible": True})
    transport.queue(200, {"compatible": True})
    transport.queue(200, {"compatible": True})

    asyncio.run(management.get_compatibility("vin", ["read_vin"], options={**options, "mode": "simulated"}))
    assert transport.requests[0]["url"].endswith("&mode=simulated")

    asyncio.run(management.get_compatibility("vin", ["read_vin"], options={**options, "test_mode": True}))
    assert transport.requests[1]["url"].endswith("&mode=test")

    asyncio.run(management.get_compatibility(
        "vin", ["read_vin"], options={**options, "mode": "live", "test_mode_compatibility_level": "compatible"},
    ))
    assert transport.requests[2]["url"].endswith("&test_mode_compatibility_level=compatible&mode=test")


def test_compatibility_validation(transport):
    with pytest.raises(InvalidParameterValue, match="vin is a required field"):
        asyncio.run(management.get_compatibility(None, ["read_vin"]))
    with pytest.raises(InvalidParameterValue, match="scope is a required field"):
        asyncio.run(management.get_compatibility("vin", []))
    with pytest.raises(InvalidParameterValue) as exc:
        asyncio.run(management.get_compatibility(
            "vin", ["read_vin"], options={"client_id": "a", "client_secret": "b", "mode": "invalid"},
        ))
    assert str(exc.value) == INVALID_MODE
    assert transport.requests == []


def test_compatibility_credentials_from_env(transport, monkeypatch):
    monkeypatch.setenv("SMARTCAR_CLIENT_ID", "env_id")
    monkeypatch.setenv("SMARTCAR_CLIENT_SECRET", "env_secret")
    transport.queue(200, {"compatible": False})

    asyncio.run(management.get_compatibility("vin", ["read_vin"], options={"transport": transport}))
    assert transport.last["headers"]["Authorization"] == basic("env_id", "env_secret")


def test_compatibility_missing_credentials(transport):
    with pytest.raises(ConfigNotFound, match="Environment variable SMARTCAR_CLIENT_ID not found !"):
        asyncio.run(management.get_compatibility("vin", ["read_vin"], options={"transport": transport}))


def test_user_and_vehicles(transport):
    transport.queue(200, {"id": "user-id"})
    transport.queue(200, {"vehicles": ["v1", "v2"], "paging": {"count": 2, "offset": 0}})

    user = asyncio.run(management.get_user("token", options={"transport": transport}))
    assert user.id == "user-id"
    assert transport.requests[0]["url"] == "https://api.smartcar.com/v2.0/user"
    assert transport.requests[0]["headers"]["Authorization"] == "Bearer token"

    vehicles = asyncio.run(management.get_vehicles("token", {"limit": 2}, version="1.0", options={"transport": transport}))
    assert vehicles.vehicles == ["v1", "v2"]
    assert transport.requests[1]["url"] == "https://api.smartcar.com/v1.0/vehicles?limit=2"


def test_get_connections(transport):
    transport.queue(200, {"connections": [{"userId": "u", "vehicleId": "v"}], "paging": {"cursor": None}})

    result = asyncio.run(management.get_connections("amt", {"user_id": "u"}, options={"transport": transport}))

    assert result.connections[0].vehicleId == "v"
    request = transport.last
    assert request["url"] == "https://management.smartcar.com/v2.0/management/connections?user_id=u&limit=10"
    assert request["headers"]["Authorization"] == basic("default", "amt")


def test_get_connections_custom_username_and_paging(transport):
    transport.queue(200, {"connections": []})

    asyncio.run(management.get_connections(
        "amt", paging={"limit": 5, "cursor": "c1"}, options={"transport": transport, "username": "admin"},
    ))
    assert transport.last["url"].endswith("/management/connections?limit=5&cursor=c1")
    assert transport.last["headers"]["Authorization"] == basic("admin", "amt")


def test_delete_connections(transport):
    transport.queue(200, {"connections": [{"userId": "u", "vehicleId": "v"}]})

    result = asyncio.run(management.delete_connections("amt", {"vehicle_id": "v"}, options={"transport": transport}))
    assert result.connections[0].userId == "u"
    assert transport.last["method"] == "DELETE"
    assert transport.last["url"] == "https://management.smartcar.com/v2.0/management/connections?vehicle_id=v"


def test_delete_connections_filter_validation(transport):
    with pytest.raises(InvalidParameterValue, match="Filter can contain EITHER user_id OR vehicle_id, not both."):
        asyncio.run(management.delete_connections("amt", {"user_id": "u", "vehicle_id": "v"}))
    with pytest.raises(InvalidParameterValue, match="Filter needs one of user_id OR vehicle_id."):
        asyncio.run(management.delete_connections("amt", {}))


def test_hash_challenge_and_verify_payload():
    expected = hmac.new(b"amt", b"challenge", hashlib.sha256).hexdigest()
    assert management.hash_challenge("amt", "challenge") == expected

    body = {"version": "2.0", "webhookId": "wh", "payload": {"vehicles": ["v"]}}
    signature = management.hash_challenge("amt", '{"version":"2.0","webhookId":"wh","payload":{"vehicles":["v"]}}')
    assert management.verify_payload("amt", signature, body) is True
    assert management.verify_payload("amt", "0" * 64, body) is False
