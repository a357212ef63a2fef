"""
Application level calls: compatibility, user, vehicle list, connection management
and webhook signature helpers.
"""

import hashlib
import hmac
import json
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from .api_client import ApiClient
from .auth.auth_client import TEST, determine_mode
from .auth.authentication import BASIC, BEARER, encode_basic_credentials, generate_basic_management_auth
from .config import ApiConfig, ConfigLoader
from .endpoints import get_global_endpoints
from .errors import InvalidParameterValue
from .parser import build_response
from .structured import Record

logger = logging.getLogger(__name__)

GLOBAL_ENDPOINTS = get_global_endpoints()


def _client(token: str, auth_type: str, options: Mapping[str, Any], management: bool = False,
            version: Optional[str] = None) -> ApiClient:
    config = options.get("config") or ApiConfig.from_env()
    return ApiClient(
        token,
        auth_type=auth_type,
        config=config.with_version(version or options.get("version")),
        transport=options.get("transport"),
        management=management,
    )


def _client_credentials(options: Mapping[str, Any]) -> str:
    loader = ConfigLoader()
    client_id = options.get("client_id") or loader.get("SMARTCAR_CLIENT_ID")
    client_secret = options.get("client_secret") or loader.get("SMARTCAR_CLIENT_SECRET")
    return encode_basic_credentials(client_id, client_secret)


def build_compatibility_params(vin: str, scope: Iterable[str], country: str,
                               options: Mapping[str, Any]) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "vin": vin,
        "scope": " ".join(scope),
        "country": country,
        "flags": options.get("flags"),
    }
    mode = determine_mode(options.get("test_mode"), options.get("mode"))
    if options.get("test_mode_compatibility_level") is not None:
        params["test_mode_compatibility_level"] = options["test_mode_compatibility_level"]
        mode = TEST
    if mode is not None:
        params["mode"] = mode
    return params


async def get_compatibility(vin: str, scope: Iterable[str], country: str = "US",
                            options: Optional[Mapping[str, Any]] = None) -> Record:
    """
    Check whether a VIN is compatible with a set of permissions.

    Authenticated with the application's client credentials, taken from
    ``options`` (``client_id``, ``client_secret``) or the environment.

    Args:
        vin: VIN of the vehicle.
        scope: Permissions to check, e.g. ``["read_odometer"]``.
        country: ISO 3166-1 alpha-2 country code.
        options: ``client_id``, ``client_secret``, ``version``, ``flags``,
            ``mode``, ``test_mode`` (deprecated), ``test_mode_compatibility_level``,
            ``config``, ``transport``.
    """
    if vin is None:
        raise InvalidParameterValue("vin is a required field")
    if not scope:
        raise InvalidParameterValue("scope is a required field")
    options = dict(options or {})
    params = build_compatibility_params(vin, scope, country, options)

    client = _client(_client_credentials(options), BASIC, options)
    body, headers = await client.get(GLOBAL_ENDPOINTS["compatibility"]["path"], query=params)
    return build_response(body, headers)


async def get_user(token: str, version: Optional[str] = None,
                   options: Optional[Mapping[str, Any]] = None) -> Record:
    """Id of the user who authorized ``token``."""
    client = _client(token, BEARER, options or {}, version=version)
    body, headers = await client.get(GLOBAL_ENDPOINTS["user"]["path"])
    return build_response(body, headers)


async def get_vehicles(token: str, paging: Optional[Mapping[str, Any]] = None, version: Optional[str] = None,
                       options: Optional[Mapping[str, Any]] = None) -> Record:
    """Paged list of vehicle ids the user connected to the application."""
    client = _client(token, BEARER, options or {}, version=version)
    body, headers = await client.get(GLOBAL_ENDPOINTS["vehicles"]["path"], query=paging)
    return build_response(body, headers)


async def get_connections(amt: str, filter: Optional[Mapping[str, Any]] = None,
                          paging: Optional[Mapping[str, Any]] = None,
                          options: Optional[Mapping[str, Any]] = None) -> Record:
    """
    Paged list of vehicle connections of the application.

    Args:
        amt: Application management token.
        filter: Optional ``user_id`` / ``vehicle_id``.
        paging: Optional ``limit`` (default 10) and ``cursor``.
        options: ``username``, ``version``, ``config``, ``transport``.
    """
    options = options or {}
    endpoint = GLOBAL_ENDPOINTS["connections"]
    paging = dict(paging or {})
    if paging.get("limit") is None:
        paging["limit"] = endpoint["default_limit"]
    query = {key: value for key, value in {**(filter or {}), **paging}.items() if value is not None}

    token = generate_basic_management_auth(amt, options.get("username"))
    client = _client(token, BASIC, options, management=endpoint["management"])
    body, headers = await client.get(endpoint["path"], query=query)
    return build_response(body, headers)


async def delete_connections(amt: str, filter: Optional[Mapping[str, Any]] = None,
                             options: Optional[Mapping[str, Any]] = None) -> Record:
    """
    Delete the connections of one user or one vehicle.

    Raises:
        InvalidParameterValue: unless exactly one of ``user_id`` / ``vehicle_id`` is given.
    """
    filter = filter or {}
    options = options or {}
    user_id = filter.get("user_id")
    vehicle_id = filter.get("vehicle_id")
    if user_id and vehicle_id:
        raise InvalidParameterValue("Filter can contain EITHER user_id OR vehicle_id, not both.")
    if not (user_id or vehicle_id):
        raise InvalidParameterValue("Filter needs one of user_id OR vehicle_id.")

    query = {"user_id": user_id} if user_id else {"vehicle_id": vehicle_id}
    endpoint = GLOBAL_ENDPOINTS["connections"]
    token = generate_basic_management_auth(amt, options.get("username"))
    client = _client(token, BASIC, options, management=endpoint["management"])
    body, headers = await client.delete(endpoint["path"], query=query)
    return build_response(body, headers)


def hash_challenge(amt: str, challenge: str) -> str:
    """HMAC-SHA256 hex digest of ``challenge`` keyed with the management token."""
    return hmac.new(amt.encode(), challenge.encode(), hashlib.sha256).hexdigest()


def verify_payload(amt: str, signature: str, body: Any) -> bool:
    """Check a webhook ``sc-signature`` against the compact JSON of ``body``."""
    payload = body if isinstance(body, str) else json.dumps(body, separators=(",", ":"))
    return hmac.compare_digest(hash_challenge(amt, payload), signature or "")
