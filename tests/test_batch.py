import asyncio

import pytest

from smartcar.batch import process_batch_response, resolve_batch_paths
from smartcar.errors import InvalidParameterValue, SmartcarApiError
from smartcar.vehicle import Vehicle


def make_vehicle(transport):
    return Vehicle("access_token", "vehicle_id", transport=transport)


BATCH_BODY = {
    "responses": [
        {
            "path": "/odometer",
            "code": 200,
            "headers": {"sc-data-age": "2021-05-01T10:00:00.000Z", "sc-unit-system": "metric"},
            "body": {"distance": 378},
        },
        {
            "path": "/location",
            "code": 409,
            "body": {
                "type": "VEHICLE_STATE",
                "code": "UNREACHABLE",
                "description": "The vehicle is unreachable",
                "resolution": {"type": "RETRY_LATER"},
            },
        },
        {
            "path": "/charge",
            "code": 200,
            "body": {"isPluggedIn": False, "state": "NOT_CHARGING"},
        },
    ]
}


def test_batch_defers_item_errors_until_read(transport):
    transport.queue(200, BATCH_BODY, {"Content-Type": "application/json", "sc-request-id": "outer"})
    result = asyncio.run(make_vehicle(transport).batch(["/odometer", "/location", "/charge"]))

    assert result.odometer.distance == 378
    assert result.odometer.meta.unit_system == "metric"
    assert result.charge.is_plugged_in is False
    assert result.meta.request_id == "outer"

    with pytest.raises(SmartcarApiError) as exc:
        result.location
    assert exc.value.status_code == 409
    assert exc.value.code == "UNREACHABLE"
    assert exc.value.resolution.type == "RETRY_LATER"

    with pytest.raises(SmartcarApiError):
        result["location"]
    assert set(result.errors()) == {"location"}
    assert result.succeeded() == ["odometer", "charge"]


def test_batch_request_body_and_url(transport):
    transport.queue(200, {"responses": []})
    asyncio.run(make_vehicle(transport).batch(["odometer", "/tires/pressure", "attributes"]))

    request = transport.last
    assert request["method"] == "POST"
    assert request["url"] == "https://api.smartcar.com/v2.0/vehicles/vehicle_id/batch"
    assert '"/tires/pressure"' in request["body"]
    assert '{"path": "/"}' in request["body"]


def test_unsupported_paths_fail_before_any_request(transport):
    with pytest.raises(InvalidParameterValue) as exc:
        asyncio.run(make_vehicle(transport).batch(["/odometer", "what", "where"]))

    assert str(exc.value) == "Unsupported attribute(s) requested in batch - what,where"
    assert transport.requests == []


def test_outer_error_raises(transport):
    transport.queue(500, {"type": "SERVER", "code": "INTERNAL", "description": "boom"})

    with pytest.raises(SmartcarApiError) as exc:
        asyncio.run(make_vehicle(transport).batch(["/odometer"]))
    assert exc.value.message == "SERVER:INTERNAL - boom"


def test_item_with_text_body_is_classified():
    result = process_batch_response(
        {"responses": [{"path": "/fuel", "code": 502, "headers": {"Content-Type": "text/plain"}, "body": "bad gateway"}]},
        {},
    )
    assert result.errors()["fuel"].message == "bad gateway"


def test_resolve_batch_paths():
    assert resolve_batch_paths(["odometer", "/vin"]) == ["/odometer", "/vin"]
    with pytest.raises(InvalidParameterValue, match="paths is a required field"):
        resolve_batch_paths(None)


def test_item_headers_win_regardless_of_case():
    result = process_batch_response(
        {
            "responses": [
                {"path": "/odometer", "code": 200, "headers": {"SC-Request-Id": "item"}, "body": {"distance": 1}},
                {"path": "/fuel", "code": 502, "headers": {"Content-Type": "text/plain"}, "body": "bad gateway"},
            ]
        },
        {"sc-request-id": "outer", "content-type": "application/json"},
    )

    assert result.odometer.meta.request_id == "item"
    assert result.errors()["fuel"].message == "bad gateway"
    assert result.meta.request_id == "outer"
