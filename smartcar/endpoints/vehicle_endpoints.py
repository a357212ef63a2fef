"""
Vehicle endpoint definitions for the Smartcar API.
Each entry maps a logical resource name to its verb, path template and alias table.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..errors import InvalidParameterValue

GET = "GET"
POST = "POST"
PUT = "PUT"
DELETE = "DELETE"


@dataclass(frozen=True)
class ResourcePathSpec:
    name: str
    verb: str
    path: Callable[..., str]
    aliases: Mapping[str, str] = field(default_factory=dict)
    batch: bool = False
    # Request body for actions: a static dict or a callable of the extra arguments.
    body: Union[None, Dict[str, Any], Callable[..., Dict[str, Any]]] = None

    def build_path(self, vehicle_id: str, *args: Any) -> str:
        return self.path(vehicle_id, *args)

    def build_body(self, *args: Any) -> Optional[Dict[str, Any]]:
        if callable(self.body):
            return self.body(*args)
        if self.body is not None:
            return dict(self.body)
        return None


def _vehicle_path(suffix: str = "") -> Callable[[str], str]:
    return lambda vehicle_id: f"/vehicles/{vehicle_id}{suffix}"


def _service_history_path(vehicle_id: str, start_date: Optional[str] = None, end_date: Optional[str] = None) -> str:
    path = f"/vehicles/{vehicle_id}/service/history"
    query = []
    if start_date is not None:
        query.append(f"start_date={start_date}")
    if end_date is not None:
        query.append(f"end_date={end_date}")
    return f"{path}?{'&'.join(query)}" if query else path


def _webhook_path(vehicle_id: str, webhook_id: str) -> str:
    return f"/vehicles/{vehicle_id}/webhooks/{webhook_id}"


_DEFINITIONS = [
    # Data endpoints (batch eligible)
    ResourcePathSpec("attributes", GET, _vehicle_path(), batch=True),
    ResourcePathSpec(
        "battery", GET, _vehicle_path("/battery"), batch=True,
        aliases={"percentRemaining": "percentage_remaining"},
    ),
    ResourcePathSpec("battery_capacity", GET, _vehicle_path("/battery/capacity"), batch=True),
    ResourcePathSpec(
        "charge", GET, _vehicle_path("/charge"), batch=True,
        aliases={"isPluggedIn": "is_plugged_in"},
    ),
    ResourcePathSpec("charge_limit", GET, _vehicle_path("/charge/limit"), batch=True),
    ResourcePathSpec(
        "engine_oil", GET, _vehicle_path("/engine/oil"), batch=True,
        aliases={"lifeRemaining": "life_remaining"},
    ),
    ResourcePathSpec(
        "fuel", GET, _vehicle_path("/fuel"), batch=True,
        aliases={"amountRemaining": "amount_remaining", "percentRemaining": "percent_remaining"},
    ),
    ResourcePathSpec("location", GET, _vehicle_path("/location"), batch=True),
    ResourcePathSpec("odometer", GET, _vehicle_path("/odometer"), batch=True),
    ResourcePathSpec("permissions", GET, _vehicle_path("/permissions"), batch=True),
    ResourcePathSpec(
        "tire_pressure", GET, _vehicle_path("/tires/pressure"), batch=True,
        aliases={
            "backLeft": "back_left",
            "backRight": "back_right",
            "frontLeft": "front_left",
            "frontRight": "front_right",
        },
    ),
    ResourcePathSpec("vin", GET, _vehicle_path("/vin"), batch=True),
    ResourcePathSpec(
        "lock_status", GET, _vehicle_path("/security"), batch=True,
        aliases={"isLocked": "is_locked", "chargingPort": "charging_port"},
    ),
    ResourcePathSpec("diagnostic_system_status", GET, _vehicle_path("/diagnostics/system_status"), batch=True),
    ResourcePathSpec("diagnostic_trouble_codes", GET, _vehicle_path("/diagnostics/dtcs"), batch=True),
    ResourcePathSpec("service_history", GET, _service_history_path),

    # Actions
    ResourcePathSpec("disconnect", DELETE, _vehicle_path("/application")),
    ResourcePathSpec("lock", POST, _vehicle_path("/security"), body={"action": "LOCK"}),
    ResourcePathSpec("unlock", POST, _vehicle_path("/security"), body={"action": "UNLOCK"}),
    ResourcePathSpec("start_charge", POST, _vehicle_path("/charge"), body={"action": "START"}),
    ResourcePathSpec("stop_charge", POST, _vehicle_path("/charge"), body={"action": "STOP"}),
    ResourcePathSpec(
        "set_charge_limit", POST, _vehicle_path("/charge/limit"),
        body=lambda limit: {"limit": limit},
    ),
    ResourcePathSpec(
        "send_destination", POST, _vehicle_path("/navigation/destination"),
        body=lambda latitude, longitude: {"latitude": latitude, "longitude": longitude},
    ),

    # Webhooks
    ResourcePathSpec(
        "subscribe", POST, _webhook_path,
        aliases={"webhookId": "webhook_id", "vehicleId": "vehicle_id"},
    ),
    ResourcePathSpec("unsubscribe", DELETE, _webhook_path),
]

VEHICLE_RESOURCES: Mapping[str, ResourcePathSpec] = MappingProxyType(
    {spec.name: spec for spec in _DEFINITIONS}
)

# Paths whose logical name is not the slash-to-underscore form.
_SPECIAL_PATH_NAMES = MappingProxyType({
    "/": "attributes",
    "/tires/pressure": "tire_pressure",
    "/security": "lock_status",
    "/diagnostics/system_status": "diagnostic_system_status",
    "/diagnostics/dtcs": "diagnostic_trouble_codes",
})

# Placeholder id used to derive relative paths from the templates.
_PLACEHOLDER_ID = "{id}"


def get_resource(name: str) -> ResourcePathSpec:
    try:
        return VEHICLE_RESOURCES[name]
    except KeyError:
        raise InvalidParameterValue(f"Unknown vehicle resource: {name}") from None


def relative_path(spec: ResourcePathSpec, vehicle_id: str = _PLACEHOLDER_ID, *args: Any) -> str:
    """Path of ``spec`` with the ``/vehicles/{id}`` prefix stripped; the root is ``/``."""
    full = spec.build_path(vehicle_id, *args)
    prefix = f"/vehicles/{vehicle_id}"
    suffix = full[len(prefix):] if full.startswith(prefix) else full
    return suffix or "/"


def path_to_name(path: str) -> str:
    """Logical resource name for a vehicle-relative path."""
    path = path.split("?", 1)[0]
    if not path.startswith("/"):
        path = f"/{path}"
    if path in _SPECIAL_PATH_NAMES:
        return _SPECIAL_PATH_NAMES[path]
    return "_".join(part for part in path.split("/") if part)


def batch_paths() -> Dict[str, str]:
    """Logical name -> relative path for every batch eligible resource."""
    return {name: relative_path(spec) for name, spec in VEHICLE_RESOURCES.items() if spec.batch}
