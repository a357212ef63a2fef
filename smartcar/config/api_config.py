"""
API origin, version and timeout settings.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional

API_ORIGIN = "https://api.smartcar.com"
MANAGEMENT_API_ORIGIN = "https://management.smartcar.com"
AUTH_ORIGIN = "https://auth.smartcar.com"
CONNECT_ORIGIN = "https://connect.smartcar.com"

# Number of seconds to wait for responses
DEFAULT_REQUEST_TIMEOUT = 310

DEFAULT_API_VERSION = "2.0"

# Process-wide default, read by clients built without an explicit version.
# Set once at startup; there is no teardown.
_api_version = DEFAULT_API_VERSION


def set_api_version(version: str):
    """Set the default API version (without the ``v`` prefix)."""
    global _api_version
    _api_version = str(version)


def get_api_version() -> str:
    return _api_version


@dataclass(frozen=True)
class ApiConfig:
    version: str = field(default_factory=get_api_version)
    api_origin: str = API_ORIGIN
    management_api_origin: str = MANAGEMENT_API_ORIGIN
    auth_origin: str = AUTH_ORIGIN
    connect_origin: str = CONNECT_ORIGIN
    timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_env(cls, version: Optional[str] = None, timeout: Optional[float] = None) -> "ApiConfig":
        """Build a config with origin overrides from ``SMARTCAR_*_ORIGIN`` variables."""
        return cls(
            version=str(version) if version is not None else get_api_version(),
            api_origin=os.getenv("SMARTCAR_API_ORIGIN") or API_ORIGIN,
            management_api_origin=os.getenv("SMARTCAR_MANAGEMENT_API_ORIGIN") or MANAGEMENT_API_ORIGIN,
            auth_origin=os.getenv("SMARTCAR_AUTH_ORIGIN") or AUTH_ORIGIN,
            connect_origin=os.getenv("SMARTCAR_CONNECT_ORIGIN") or CONNECT_ORIGIN,
            timeout=timeout if timeout is not None else DEFAULT_REQUEST_TIMEOUT,
        )

    def with_version(self, version: Optional[str]) -> "ApiConfig":
        if version is None:
            return self
        return replace(self, version=str(version))

    def base_url(self, management: bool = False) -> str:
        origin = self.management_api_origin if management else self.api_origin
        return f"{origin.rstrip('/')}/v{self.version}"
