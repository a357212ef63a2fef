"""
Smartcar API client - async vehicle data, actions, batch requests and OAuth
built on aiohttp.
"""
__version__ = "1.0.0"

from .auth import AuthClient
from .batch import BatchResult
from .config import get_api_version, set_api_version, setup_logging
from .errors import (
    ConfigNotFound,
    InvalidParameterValue,
    SmartcarApiError,
    SmartcarException,
    SmartcarTransportError,
)
from .management import (
    delete_connections,
    get_compatibility,
    get_connections,
    get_user,
    get_vehicles,
    hash_challenge,
    verify_payload,
)
from .structured import Record
from .vehicle import Vehicle

__all__ = [
    "AuthClient",
    "BatchResult",
    "ConfigNotFound",
    "InvalidParameterValue",
    "Record",
    "SmartcarApiError",
    "SmartcarException",
    "SmartcarTransportError",
    "Vehicle",
    "delete_connections",
    "get_api_version",
    "get_compatibility",
    "get_connections",
    "get_user",
    "get_vehicles",
    "hash_challenge",
    "set_api_version",
    "setup_logging",
    "verify_payload",
]
