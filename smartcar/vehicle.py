"""
Vehicle facade: one coroutine per vehicle resource, all dispatched through the endpoint registry.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional, Tuple

from .api_client import ApiClient, METRIC, UNITS
from .auth.authentication import BEARER, SmartcarAuthenticator
from .batch import BatchOrchestrator, BatchResult
from .config import ApiConfig
from .endpoints import get_resource
from .errors import InvalidParameterValue
from .parser import apply_aliases, build_meta, build_response
from .structured import Record, normalize
from .transport import HttpTransport

logger = logging.getLogger(__name__)


class Vehicle:
    """
    A connected vehicle.

    Calls are independent request/response round trips; nothing mutable is
    kept between them, so one instance can serve concurrent tasks.

    Args:
        token: Access token of the vehicle owner.
        vehicle_id: Smartcar vehicle id.
        unit_system: ``metric`` (default) or ``imperial``.
        version: API version, defaults to the process-wide version.
        flags: Early access flags, name -> string or bool.
        config: Explicit ``ApiConfig`` (origins, version, timeout).
        transport: Optional ``HttpTransport`` to send requests with.
    """

    def __init__(
        self,
        token: str,
        vehicle_id: str,
        unit_system: str = METRIC,
        version: Optional[str] = None,
        flags: Optional[Mapping[str, Any]] = None,
        config: Optional[ApiConfig] = None,
        transport: Optional[HttpTransport] = None,
    ):
        if vehicle_id is None:
            raise InvalidParameterValue("Vehicle ID (id) is a required field")
        if token is None:
            raise InvalidParameterValue("Access Token(token) is a required field")
        unit_system = unit_system or METRIC
        if unit_system not in UNITS:
            raise InvalidParameterValue(f"Invalid Units provided : {unit_system}")

        self.id = vehicle_id
        self.unit_system = unit_system
        self.flags = dict(flags or {})
        config = (config or ApiConfig.from_env()).with_version(version)
        self.api_client = ApiClient(
            token,
            auth_type=BEARER,
            config=config,
            unit_system=unit_system,
            flags=self.flags,
            transport=transport,
        )
        self.batch_orchestrator = BatchOrchestrator(self.api_client)

    @property
    def version(self) -> str:
        return self.api_client.config.version

    async def call_resource(
        self,
        name: str,
        *args: Any,
        query: Optional[Mapping[str, Any]] = None,
        auth: Optional[SmartcarAuthenticator] = None,
    ) -> Record:
        """Request the registry resource ``name`` and return the aliased response."""
        spec = get_resource(name)
        path = spec.build_path(self.id, *args)
        body = spec.build_body(*args) if spec.body is not None else None
        response, headers = await self.api_client.request(spec.verb, path, query=query, body=body, auth=auth)
        return apply_aliases(build_response(response, headers), spec.aliases)

    # Data

    async def attributes(self) -> Record:
        """Make, model, year and id of the vehicle."""
        return await self.call_resource("attributes")

    async def battery(self) -> Record:
        """State of charge and remaining range of an EV/PHEV battery."""
        return await self.call_resource("battery")

    async def battery_capacity(self) -> Record:
        return await self.call_resource("battery_capacity")

    async def charge(self) -> Record:
        """Current charge status."""
        return await self.call_resource("charge")

    async def get_charge_limit(self) -> Record:
        return await self.call_resource("charge_limit")

    async def engine_oil(self) -> Record:
        return await self.call_resource("engine_oil")

    async def fuel(self) -> Record:
        return await self.call_resource("fuel")

    async def location(self) -> Record:
        return await self.call_resource("location")

    async def odometer(self) -> Record:
        return await self.call_resource("odometer")

    async def tire_pressure(self) -> Record:
        return await self.call_resource("tire_pressure")

    async def vin(self) -> Record:
        return await self.call_resource("vin")

    async def lock_status(self) -> Record:
        """Lock status plus open status of doors, windows, storage, sunroof and charging port."""
        return await self.call_resource("lock_status")

    async def diagnostic_system_status(self) -> Record:
        return await self.call_resource("diagnostic_system_status")

    async def diagnostic_trouble_codes(self) -> Record:
        return await self.call_resource("diagnostic_trouble_codes")

    async def permissions(self, paging: Optional[Mapping[str, Any]] = None) -> Record:
        """Permissions granted to the application for this vehicle."""
        return await self.call_resource("permissions", query=paging)

    async def service_history(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> Record:
        """
        Service records of the vehicle between two ``YYYY-MM-DD`` dates.

        Without both dates the last 365 days (UTC) are requested.
        """
        if start_date is None or end_date is None:
            start_date, end_date = default_date_range()
        return await self.call_resource("service_history", start_date, end_date)

    # Actions

    async def lock(self) -> Record:
        return await self.call_resource("lock")

    async def unlock(self) -> Record:
        return await self.call_resource("unlock")

    async def start_charge(self) -> Record:
        return await self.call_resource("start_charge")

    async def stop_charge(self) -> Record:
        return await self.call_resource("stop_charge")

    async def set_charge_limit(self, limit: float) -> Record:
        """Set the charge limit, a value between 0 and 1."""
        return await self.call_resource("set_charge_limit", limit)

    async def send_destination(self, latitude: float, longitude: float) -> Record:
        return await self.call_resource("send_destination", latitude, longitude)

    async def disconnect(self) -> Record:
        """Revoke this application's access to the vehicle."""
        return await self.call_resource("disconnect")

    # Webhooks

    async def subscribe(self, webhook_id: str) -> Record:
        return await self.call_resource("subscribe", webhook_id)

    async def unsubscribe(self, amt: str, webhook_id: str) -> Record:
        """Unsubscribe from a webhook; authorized with the application management token."""
        return await self.call_resource("unsubscribe", webhook_id, auth=SmartcarAuthenticator.bearer(amt))

    # Batch and raw requests

    async def batch(self, paths: Iterable[str]) -> BatchResult:
        """
        Fetch several resources in one request.

        Args:
            paths: Relative paths (``"/odometer"``) or resource names (``"odometer"``).
        """
        return await self.batch_orchestrator.batch(self.id, paths)

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> Record:
        """
        Request any vehicle path, e.g. brand specific endpoints.

        Returns a record with ``body`` (normalized response) and ``meta``.
        Caller headers override the defaults, including ``Authorization``.
        """
        path = f"/vehicles/{self.id}/{path.lstrip('/')}"
        response, response_headers = await self.api_client.request(
            method, path, body=body or None, headers=headers
        )
        return Record(body=normalize(response), meta=build_meta(response_headers))


def default_date_range(today: Optional[datetime] = None) -> Tuple[str, str]:
    end = (today or datetime.now(timezone.utc)).date()
    start = end - timedelta(days=365)
    return start.isoformat(), end.isoformat()
